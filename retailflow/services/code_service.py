"""
Entry code generation service.

Mints human-readable business codes (SKU, supplier, customer, purchase
order, invoice) from the per-type counters in `codeformats`.

The counter is advanced with a single conditional UPDATE before it is read
back, so the row lock taken by the UPDATE serializes concurrent callers
for the same code type until their transaction ends.
"""
import logging

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError

from retailflow.blueprints.metrics import codes_generated_total
from retailflow.exceptions import RetailError, NotFoundError, ValidationError, InternalError
from retailflow.models import CodeFormat, CodeType, DEFAULT_CODE_FORMATS, DEFAULT_CODE_LENGTH, format_code

logger = logging.getLogger(__name__)


def resolve_code_type(value) -> int:
    """Accept a CodeType, its integer value, or its name ('invoice')."""
    if isinstance(value, CodeType):
        return int(value)
    if isinstance(value, bool) or value is None:
        raise ValidationError('codeType is required')
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if text.isdigit():
        return int(text)
    try:
        return int(CodeType[text.upper().replace(' ', '_').replace('-', '_')])
    except KeyError:
        raise ValidationError(f'Unknown code type: {value}')


def next_code(session, code_type) -> str:
    """
    Advance the counter for code_type and return the formatted code.

    Runs inside the caller's transaction and does NOT commit: the caller
    decides whether the code is kept (commit) or released (rollback).
    Callers report the code type to record_generated() once they have committed.

    Args:
        session: SQLAlchemy session
        code_type: CodeType (or its int value / name)

    Returns:
        str: prefix + zero padded counter value

    Raises:
        NotFoundError: If no code format exists for code_type
    """
    type_id = resolve_code_type(code_type)

    result = session.execute(
        update(CodeFormat)
        .where(CodeFormat.code == type_id)
        .values(next_value=CodeFormat.next_value + 1)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        raise NotFoundError(f'No code format configured for code type {type_id}')

    # The UPDATE already holds the row lock; FOR UPDATE keeps the intent explicit
    fmt = (session.query(CodeFormat)
           .filter(CodeFormat.code == type_id)
           .populate_existing()
           .with_for_update()
           .one())

    code = format_code(fmt.prefix, fmt.next_value, fmt.length)
    if fmt.length and len(str(fmt.next_value)) > fmt.length:
        logger.warning(
            f"[CODES] Counter for type {type_id} exceeds {fmt.length} digits; "
            f"generated widened code {code}"
        )

    return code


def generate_entry_code(session, code_type) -> str:
    """
    Generate a code in its own transaction and commit it.

    Used when a code is requested on its own (e.g. receipt entry codes);
    composite writers call next_code() inside their transaction instead.
    """
    try:
        code = next_code(session, code_type)
        session.commit()
        record_generated(code_type)
        logger.info(f"[CODES] Generated {code}")
        return code
    except RetailError:
        session.rollback()
        raise
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception(f"[CODES] Error generating code for type {code_type}: {e}")
        raise InternalError('Error generating entry code')


def list_code_formats(session):
    """Return all code formats ordered by type."""
    return session.query(CodeFormat).order_by(CodeFormat.code).all()


def update_code_format(session, code_type, prefix=None, length=None, sample=None) -> CodeFormat:
    """
    Update prefix, length and sample of a code format.

    The counter itself is never changed here, so codes keep increasing.
    """
    type_id = resolve_code_type(code_type)

    try:
        fmt = session.query(CodeFormat).filter(CodeFormat.code == type_id).first()
        if not fmt:
            raise NotFoundError(f'No code format configured for code type {type_id}')

        if prefix is not None:
            fmt.prefix = str(prefix).strip()
        if length is not None:
            try:
                new_length = int(length)
            except (TypeError, ValueError):
                raise ValidationError('length must be a whole number')
            if new_length < 1:
                raise ValidationError('length must be at least 1')
            fmt.length = new_length
        if sample is not None:
            fmt.sample = sample
        else:
            fmt.sample = format_code(fmt.prefix, fmt.next_value + 1, fmt.length)

        session.commit()
        logger.info(f"[CODES] Updated code format {type_id}: prefix={fmt.prefix} length={fmt.length}")
        return fmt

    except RetailError:
        session.rollback()
        raise
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception(f"[CODES] Error updating code format {type_id}: {e}")
        raise InternalError('An error occurred while updating the code format.')


def seed_code_formats(session) -> int:
    """Insert the default code formats that are missing. Returns how many were added."""
    existing = {row.code for row in session.query(CodeFormat.code).all()}
    added = 0
    for code_type, (prefix, description) in DEFAULT_CODE_FORMATS.items():
        if int(code_type) in existing:
            continue
        session.add(CodeFormat(
            code=int(code_type),
            description=description,
            prefix=prefix,
            length=DEFAULT_CODE_LENGTH,
            sample=format_code(prefix, 1, DEFAULT_CODE_LENGTH),
            next_value=0,
        ))
        added += 1
    session.commit()
    return added


def record_generated(code_type) -> None:
    """Count a code whose transaction has been committed."""
    codes_generated_total.labels(code_type=str(resolve_code_type(code_type))).inc()
