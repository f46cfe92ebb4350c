"""Encoding detection for CUE sheets"""
import codecs

import chardet

from .helpers import null_log


def decode_sheet(raw_data, log_func=None):
    """
    Decode raw CUE sheet bytes into text.

    Sheets ripped on older systems are frequently in a legacy code page, so
    the encoding is detected rather than assumed. A UTF-8 BOM always wins.

    Args:
        raw_data: Bytes of the sheet file
        log_func: Function to call for logging messages

    Returns:
        Decoded text
    """
    log_func = log_func or null_log

    if raw_data.startswith(codecs.BOM_UTF8):
        return raw_data.decode('utf-8-sig', errors='replace')

    try:
        return raw_data.decode('utf-8')
    except UnicodeDecodeError:
        pass

    result = chardet.detect(raw_data)
    detected_encoding = result.get('encoding') if result else None
    if not detected_encoding:
        log_func("⚠️ Could not detect encoding, decoding as UTF-8")
        return raw_data.decode('utf-8', errors='replace')

    confidence = result.get('confidence') or 0
    log_func(f"📝 CUE file encoding detected: {detected_encoding} (confidence: {confidence:.2%})")
    try:
        return raw_data.decode(detected_encoding)
    except (UnicodeDecodeError, LookupError) as e:
        log_func(f"⚠️ Failed to decode as {detected_encoding}: {e}")
        return raw_data.decode('utf-8', errors='replace')


def read_sheet_text(cue_path, log_func=None):
    """
    Read a CUE sheet file as text, whatever its encoding.

    Args:
        cue_path: Path to the CUE file
        log_func: Function to call for logging messages

    Returns:
        Decoded sheet text
    """
    with open(cue_path, 'rb') as f:
        raw_data = f.read()
    return decode_sheet(raw_data, log_func)
