"""Vehicle condition comparison and proof-of-delivery report engine."""

from importlib.metadata import PackageNotFoundError, version

__all__ = ["__version__", "assemble", "compare"]

try:
    __version__: str = version("vehiclepod")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

from .comparison import compare  # noqa: E402
from .report.pdf_builder import assemble  # noqa: E402
