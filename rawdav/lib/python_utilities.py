def to_wire(text):
    """
    Bytes for the socket.  Strings are UTF-8 encoded, bytes are passed
    on untouched and None stays None.  Unlike a text conversion, line
    endings are left alone, as request bodies may be binary.
    """
    if text is None:
        return None
    if isinstance(text, str):
        return text.encode("utf-8")
    return bytes(text)


def to_local(text):
    if text is None:
        return None
    if not isinstance(text, str):
        text = text.decode("utf-8")
    text = text.replace("\r\n", "\n")
    return text


def to_header_str(raw: bytes) -> str:
    """
    Header and status lines are decoded as latin-1, which maps every
    byte to a character and thus never fails.
    """
    return raw.decode("latin-1")
