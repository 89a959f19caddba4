"""
dagvdf.utils
------------

Light helpers shared across the VDF components: big-endian integer codecs and
strict hex handling. No eager imports here.
"""

__all__: list[str] = []
