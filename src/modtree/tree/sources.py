"""Classify module sources and derive their remote URL."""

import re
from typing import Optional

DEFAULT_REGISTRY_URL = "https://registry.terraform.io/modules"

LOCAL_PREFIXES = ("./", "../", ".\\", "..\\")
# Forced getters such as git::, hg::, s3::, gcs::
FORCED_GETTER = re.compile(r"^([a-z0-9]+)::(.+)$")
REGISTRY_SOURCE = re.compile(
    r"^(?:(?P<host>[a-z0-9.-]+\.[a-z]{2,}(?::\d+)?)/)?"
    r"(?P<namespace>[A-Za-z0-9][A-Za-z0-9_-]*)/"
    r"(?P<name>[A-Za-z0-9][A-Za-z0-9_-]*)/"
    r"(?P<provider>[a-z0-9]+)$"
)
VCS_HOSTS = ("github.com/", "bitbucket.org/")
EXACT_VERSION = re.compile(r"^=?\s*v?(\d+\.\d+\.\d+(?:[-+][0-9A-Za-z.-]+)?)$")


def is_local_source(source: str) -> bool:
    """Local paths are the only sources Terraform does not download."""
    return source.startswith(LOCAL_PREFIXES)


def _strip_subdir(source: str) -> str:
    # "host/path//sub/dir?ref=x" -> "host/path?ref=x"
    scheme_end = source.find("://")
    start = scheme_end + 3 if scheme_end >= 0 else 0
    idx = source.find("//", start)
    if idx < 0:
        return source
    rest = source[idx + 2:]
    query = ""
    if "?" in rest:
        query = "?" + rest.split("?", 1)[1]
    return source[:idx] + query


def resolve_source_url(
    source: str,
    version: Optional[str] = None,
    registry_url: str = DEFAULT_REGISTRY_URL,
) -> Optional[str]:
    """
    Derive the remote URL a module source points at.
    
    Args:
        source: Module call 'source' argument
        version: Module call 'version' constraint (registry modules only)
        registry_url: Base URL for public registry modules
        
    Returns:
        URL string, or None for local sources and unrecognised strings
    """
    source = source.strip()
    if not source or is_local_source(source):
        return None

    forced = FORCED_GETTER.match(source)
    if forced:
        return _strip_subdir(forced.group(2))

    if "://" in source or source.startswith("git@"):
        return _strip_subdir(source)

    if source.startswith(VCS_HOSTS):
        return "https://" + _strip_subdir(source)

    registry = REGISTRY_SOURCE.match(_strip_subdir(source))
    if registry:
        path = f"{registry.group('namespace')}/{registry.group('name')}/{registry.group('provider')}"
        host = registry.group("host")
        base = f"https://{host}/modules" if host else registry_url.rstrip("/")
        url = f"{base}/{path}"
        exact = EXACT_VERSION.match(version.strip()) if version else None
        if exact:
            url = f"{url}/{exact.group(1)}"
        return url

    return None
