"""Directory domain exports."""

from .cache import ResolutionCache
from .config import DirectoryConfig, load_config
from .pagination import paginate
from .resolver import AliasResolver
from .upstream import UpstreamDirectoryClient

__all__ = [
	"AliasResolver",
	"DirectoryConfig",
	"ResolutionCache",
	"UpstreamDirectoryClient",
	"load_config",
	"paginate",
]
