"""Exception types raised by the extractor.

Everything deriving from ExtractionError is fatal and ends the run with a
non-zero exit status. DecodeError is the recoverable one: the pipeline
swallows it per (table file, accumulator) pair.
"""


class ExtractionError(RuntimeError):
    """Base class for errors that abort an extraction run."""


class ArchiveListingError(ExtractionError):
    """The data directory could not be listed."""


class NoArchivesError(ExtractionError):
    """No MPQ archives were found in the data directory."""


class ArchiveOpenError(ExtractionError):
    """An MPQ archive could not be opened."""


class ArchiveReadError(ExtractionError):
    """A listed file could not be read out of an open archive."""


class BaselineLoadError(ExtractionError):
    """The baseline item table could not be read."""


class OutputWriteError(ExtractionError):
    """The exported item file could not be written."""


class DecodeError(ValueError):
    """A table file does not match the schema it was decoded against."""
