"""
Failures raised at the decode-engine boundary.

The public Disassembler API reports these as False/None results; the
exceptions only travel between an engine backend and the session opening it.
"""


class DisasmError(Exception):
    """Base class for decode-engine failures"""


class UnsupportedArchitecture(DisasmError):
    """The (architecture, bit width) pair has no engine mapping"""

    def __init__(self, arch, bit_mode):
        super().__init__(f"Unsupported architecture: {arch} ({int(bit_mode)}-bit)")
        self.arch = arch
        self.bit_mode = bit_mode


class EngineError(DisasmError):
    """The engine rejected the configuration or failed to set it up"""

    def __init__(self, message, errno=None):
        super().__init__(message)
        self.errno = errno
