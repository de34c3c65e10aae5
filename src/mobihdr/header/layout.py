"""
Declarative Record Layouts
==========================

Both MOBI headers are fixed-size, packed records: every field sits at a
fixed offset with a fixed width, and fields follow each other without
alignment padding. Rather than describe each record twice (once to read,
once to print), a record is described once as a tuple of FieldSpec entries
and everything else is derived from that table:

- the total record size
- the offset and width of each field (used by the reporter)
- unpacking raw bytes into a name -> value mapping
- packing a name -> value mapping back into bytes

Field Codes
-----------
Codes are struct module format characters:

    H    unsigned 16-bit integer
    I    unsigned 32-bit integer
    Ns   fixed-length byte array of N bytes (e.g. "4s", "36s")

A field with count > 1 is an array of consecutive values of the same
code, unpacked into a tuple in file order.

Byte Order
----------
A layout uses a single byte order for all of its fields. It is fixed when
the layout is built and never guessed from the data.
"""

from dataclasses import dataclass
from typing import Any, Mapping
import struct


# struct prefixes accepted for RecordLayout.byte_order
LITTLE_ENDIAN = "<"
BIG_ENDIAN = ">"


@dataclass(frozen=True)
class FieldSpec:
    """
    One field of a fixed-size record.

    Attributes:
        name: Attribute name of the field on the decoded record
        code: struct format code for a single element
        count: Number of consecutive elements (1 for scalars)
        description: Human-readable label used by the reporter
    """
    name: str
    code: str
    count: int = 1
    description: str = ""

    @property
    def is_array(self) -> bool:
        return self.count > 1

    @property
    def element_size(self) -> int:
        return struct.calcsize(LITTLE_ENDIAN + self.code)

    @property
    def width(self) -> int:
        """Total bytes occupied by this field."""
        return self.element_size * self.count

    @property
    def format(self) -> str:
        # "6I" for an array of integers, "36s" for a byte array
        if self.is_array:
            return f"{self.count}{self.code}"
        return self.code


@dataclass(frozen=True)
class FieldPosition:
    """Offset and width of a field within its record."""
    spec: FieldSpec
    offset: int

    @property
    def width(self) -> int:
        return self.spec.width


class RecordLayout:
    """
    Fixed layout of a packed binary record.

    Example:
        >>> layout = RecordLayout("demo", (
        ...     FieldSpec("kind", "H"),
        ...     FieldSpec("length", "I"),
        ... ))
        >>> layout.size
        6
        >>> layout.unpack(b"\\x02\\x00\\x10\\x00\\x00\\x00")
        {'kind': 2, 'length': 16}
    """

    def __init__(self, name: str, fields: tuple[FieldSpec, ...],
                 byte_order: str = LITTLE_ENDIAN):
        if byte_order not in (LITTLE_ENDIAN, BIG_ENDIAN):
            raise ValueError(f"Invalid byte order {byte_order!r}")

        names = [spec.name for spec in fields]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate field names in layout '{name}'")

        self.name = name
        self.fields = fields
        self.byte_order = byte_order
        self._struct = struct.Struct(
            byte_order + "".join(spec.format for spec in fields)
        )

        positions = []
        offset = 0
        for spec in fields:
            positions.append(FieldPosition(spec=spec, offset=offset))
            offset += spec.width
        self._positions = tuple(positions)

    def __repr__(self) -> str:
        return f"RecordLayout({self.name!r}, size={self.size})"

    @property
    def size(self) -> int:
        """Total size of the record in bytes."""
        return self._struct.size

    def positions(self) -> tuple[FieldPosition, ...]:
        """Offset table for every field, in byte order."""
        return self._positions

    def position_of(self, name: str) -> FieldPosition:
        """Look up the offset table entry for a single field."""
        for position in self._positions:
            if position.spec.name == name:
                return position
        raise KeyError(name)

    def unpack(self, data: bytes) -> dict[str, Any]:
        """
        Decode exactly `size` bytes into a name -> value mapping.

        Raises:
            ValueError: If data is not exactly `size` bytes long
        """
        if len(data) != self.size:
            raise ValueError(
                f"{self.name}: need exactly {self.size} bytes, got {len(data)}"
            )

        flat = self._struct.unpack(data)
        values: dict[str, Any] = {}
        index = 0
        for spec in self.fields:
            # struct returns a "36s" field as one item but "6I" as six
            if spec.is_array and not spec.code.endswith("s"):
                values[spec.name] = tuple(flat[index:index + spec.count])
                index += spec.count
            else:
                values[spec.name] = flat[index]
                index += 1
        return values

    def pack(self, values: Mapping[str, Any]) -> bytes:
        """
        Encode a name -> value mapping into `size` bytes.

        Raises:
            KeyError: If a field is missing from values
            ValueError: If an array field has the wrong number of elements
            struct.error: If a value does not fit its field
        """
        flat: list[Any] = []
        for spec in self.fields:
            value = values[spec.name]
            if spec.is_array and not spec.code.endswith("s"):
                if len(value) != spec.count:
                    raise ValueError(
                        f"{self.name}.{spec.name}: expected {spec.count} "
                        f"values, got {len(value)}"
                    )
                flat.extend(value)
            else:
                flat.append(value)
        return self._struct.pack(*flat)
