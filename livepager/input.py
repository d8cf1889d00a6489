"""Low-level terminal input decoding.

Reads raw bytes from the terminal and translates them into normalized key
tokens such as ``"j"``, ``"DOWN"`` or ``"PAGE_UP"``. Escape sequences are
given a short grace period so a lone Esc press still decodes promptly.
"""

from __future__ import annotations

import os
import select

ESC_SEQUENCE_TIMEOUT_MS = 25

_CONTROL_KEYS: dict[bytes, str] = {
    b"\x03": "CTRL_C",
    b"\x04": "CTRL_D",
    b"\x06": "CTRL_F",
    b"\x02": "CTRL_B",
    b"\x15": "CTRL_U",
    b"\x0c": "CTRL_L",
    b"\t": "TAB",
    b"\x08": "BACKSPACE",
    b"\x7f": "BACKSPACE",
    b"\r": "ENTER",
    b"\n": "ENTER",
}

_CSI_FINAL_KEYS: dict[bytes, str] = {
    b"A": "UP",
    b"B": "DOWN",
    b"C": "RIGHT",
    b"D": "LEFT",
    b"H": "HOME",
    b"F": "END",
}

_CSI_TILDE_KEYS: dict[bytes, str] = {
    b"1": "HOME",
    b"4": "END",
    b"5": "PAGE_UP",
    b"6": "PAGE_DOWN",
    b"7": "HOME",
    b"8": "END",
}


def _utf8_sequence_length(lead: int) -> int:
    if lead >= 0xF0:
        return 4
    if lead >= 0xE0:
        return 3
    if lead >= 0xC0:
        return 2
    return 1


class KeyReader:
    """Decode keys from one terminal file descriptor.

    Bytes read ahead while probing an escape sequence that turn out to belong
    to the next key are kept and replayed on the following read.
    """

    def __init__(self, fd: int) -> None:
        self.fd = fd
        self._pending: list[bytes] = []

    def fileno(self) -> int:
        return self.fd

    @property
    def has_pending(self) -> bool:
        return bool(self._pending)

    def _read_byte(self) -> bytes:
        if self._pending:
            return self._pending.pop(0)
        return os.read(self.fd, 1)

    def _read_ready_byte(self, timeout_ms: int) -> bytes | None:
        if self._pending:
            return self._pending.pop(0)
        ready, _, _ = select.select([self.fd], [], [], max(0.0, timeout_ms / 1000.0))
        if not ready:
            return None
        ch = os.read(self.fd, 1)
        if not ch:
            return None
        return ch

    def read_key(self, timeout_ms: int | None = None) -> str:
        """Read one key token; ``""`` means timeout or end of input."""
        if not self._pending and timeout_ms is not None:
            ready, _, _ = select.select([self.fd], [], [], max(0.0, timeout_ms / 1000.0))
            if not ready:
                return ""

        ch = self._read_byte()
        if not ch:
            return ""

        control = _CONTROL_KEYS.get(ch)
        if control is not None:
            return control
        if ch != b"\x1b":
            return self._decode_text(ch)
        return self._decode_escape()

    def _decode_text(self, lead: bytes) -> str:
        data = lead
        for _ in range(_utf8_sequence_length(lead[0]) - 1):
            nxt = self._read_ready_byte(ESC_SEQUENCE_TIMEOUT_MS)
            if nxt is None:
                break
            data += nxt
        return data.decode("utf-8", errors="replace")

    def _decode_escape(self) -> str:
        seq = self._read_ready_byte(ESC_SEQUENCE_TIMEOUT_MS)
        if seq is None:
            return "ESC"
        if seq == b"O":
            # SS3 form used by terminals in application cursor mode.
            final = self._read_ready_byte(ESC_SEQUENCE_TIMEOUT_MS)
            if final is None:
                return "ESC"
            return _CSI_FINAL_KEYS.get(final, "ESC")
        if seq != b"[":
            self._pending.append(seq)
            return "ESC"

        seq = self._read_ready_byte(ESC_SEQUENCE_TIMEOUT_MS)
        if seq is None:
            return "ESC"
        key = _CSI_FINAL_KEYS.get(seq)
        if key is not None:
            return key
        if seq in _CSI_TILDE_KEYS:
            terminator = self._read_ready_byte(ESC_SEQUENCE_TIMEOUT_MS)
            if terminator == b"~":
                return _CSI_TILDE_KEYS[seq]
        return "ESC"

