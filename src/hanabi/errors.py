"""Fatal errors raised by the reasoning core."""


class HanabiBotError(Exception):
    """Base class for errors that abort the current decision cycle."""


class CopyDepthError(HanabiBotError):
    """A hypothetical game was cloned more deeply than allowed."""


class RewindDepthError(HanabiBotError):
    """A rewind was triggered while already nested too deeply in rewinds."""
