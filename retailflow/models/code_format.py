"""Code format model - templates for generated business codes."""
import enum
from sqlalchemy import Column, Integer, BigInteger, String
from retailflow.database import Base


class CodeType(enum.IntEnum):
    """Code types, stored as the codeformats primary key."""
    PRODUCT = 1
    SUPPLIER = 2
    PURCHASE_ORDER = 3
    RECEIPT = 4
    CUSTOMER = 5
    INVOICE = 6


# Default rows inserted by `flask seed-code-formats`
DEFAULT_CODE_FORMATS = {
    CodeType.PRODUCT: ('SKU', 'Product SKU'),
    CodeType.SUPPLIER: ('SUP', 'Supplier'),
    CodeType.PURCHASE_ORDER: ('PO', 'Purchase order'),
    CodeType.RECEIPT: ('RCP', 'Receipt'),
    CodeType.CUSTOMER: ('CUS', 'Customer'),
    CodeType.INVOICE: ('INV', 'Sales invoice'),
}
DEFAULT_CODE_LENGTH = 5


def format_code(prefix: str, value: int, length: int) -> str:
    """Return prefix + value zero-padded to length digits (wider values are kept whole)."""
    return f"{prefix or ''}{str(value).zfill(length or 0)}"


class CodeFormat(Base):
    """Per code type counter plus the prefix/padding used to render codes."""

    __tablename__ = 'codeformats'

    code = Column(Integer, primary_key=True, autoincrement=False)
    description = Column(String(100), nullable=True)
    prefix = Column(String(20), nullable=False, default='')
    length = Column(Integer, nullable=False, default=DEFAULT_CODE_LENGTH)
    sample = Column(String(50), nullable=True)
    next_value = Column(BigInteger, nullable=False, default=0, server_default='0')

    def to_dict(self):
        return {
            'code': self.code,
            'description': self.description,
            'prefix': self.prefix,
            'length': self.length,
            'sample': self.sample,
            'nextValue': self.next_value,
        }

    def __repr__(self):
        return f"<CodeFormat(code={self.code}, prefix='{self.prefix}', next_value={self.next_value})>"
