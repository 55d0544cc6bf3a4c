"""Supplier and customer service - records keyed by generated codes."""
import logging
from typing import Dict, Any

from sqlalchemy.exc import SQLAlchemyError

from retailflow.exceptions import RetailError, ValidationError, NotFoundError, InternalError
from retailflow.models import Supplier, Customer, CodeType
from retailflow.services.code_service import next_code, record_generated

logger = logging.getLogger(__name__)

SUPPLIER_FIELDS = ('name', 'email', 'phone', 'address', 'city', 'country')
CUSTOMER_FIELDS = ('name', 'email', 'contact', 'address', 'city', 'country')


def _create(session, model, code_type, data, fields):
    if not data.get('name'):
        raise ValidationError('Missing required fields: name')

    label = model.__name__.lower()
    try:
        code = next_code(session, code_type)
        record = model(code=code, **{field: data.get(field) for field in fields})
        session.add(record)
        session.commit()
        record_generated(code_type)
        logger.info(f"[PARTIES] Added {label} {code} ({record.name})")
        return record

    except RetailError:
        session.rollback()
        raise
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception(f"[PARTIES] Error adding {label}: {e}")
        raise InternalError(f'Error adding {label}')


def _update_by_code(session, model, data, fields):
    code = data.get('code')
    if not code:
        raise ValidationError('Missing required fields: code')
    if not data.get('name'):
        raise ValidationError('Missing required fields: name')

    label = model.__name__.lower()
    try:
        record = session.query(model).filter(model.code == code).first()
        if not record:
            raise NotFoundError(f'{model.__name__} {code} not found')
        for field in fields:
            setattr(record, field, data.get(field))
        session.commit()
        return record

    except RetailError:
        session.rollback()
        raise
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception(f"[PARTIES] Error updating {label} {code}: {e}")
        raise InternalError(f'An error occurred while updating the {label}.')


def add_supplier(session, data: Dict[str, Any]) -> Supplier:
    return _create(session, Supplier, CodeType.SUPPLIER, data, SUPPLIER_FIELDS)


def update_supplier(session, data: Dict[str, Any]) -> Supplier:
    return _update_by_code(session, Supplier, data, SUPPLIER_FIELDS)


def delete_supplier(session, code: str) -> None:
    if not code:
        raise ValidationError('Supplier code is required')
    supplier = session.query(Supplier).filter(Supplier.code == code).first()
    if not supplier:
        raise NotFoundError(f'Supplier {code} not found')
    session.delete(supplier)
    session.commit()
    logger.info(f"[PARTIES] Deleted supplier {code}")


def add_customer(session, data: Dict[str, Any]) -> Customer:
    return _create(session, Customer, CodeType.CUSTOMER, data, CUSTOMER_FIELDS)


def update_customer(session, data: Dict[str, Any]) -> Customer:
    return _update_by_code(session, Customer, data, CUSTOMER_FIELDS)


def delete_customer(session, customer_id) -> Customer:
    if not customer_id:
        raise ValidationError('Customer ID is required')
    customer = session.query(Customer).filter(Customer.id == customer_id).first()
    if not customer:
        raise NotFoundError('Customer not found')
    session.delete(customer)
    session.commit()
    logger.info(f"[PARTIES] Deleted customer {customer.code}")
    return customer
