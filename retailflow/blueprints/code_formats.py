"""Code formats blueprint: format templates and standalone code generation."""
from flask import Blueprint, jsonify
from retailflow.database import get_session
from retailflow.middleware import json_body
from retailflow.services import code_service

code_formats_bp = Blueprint('code_formats', __name__, url_prefix='/api')


@code_formats_bp.route('/get-code-formats', methods=['GET'])
def list_code_formats():
    formats = code_service.list_code_formats(get_session())
    return jsonify([f.to_dict() for f in formats]), 200


@code_formats_bp.route('/update-code-format', methods=['POST'])
def update_code_format():
    """Body: {"type": <code type>, "prefix": ..., "length": ..., "sample": ...}"""
    data = json_body()
    fmt = code_service.update_code_format(
        get_session(),
        data.get('type'),
        prefix=data.get('prefix'),
        length=data.get('length'),
        sample=data.get('sample'),
    )
    return jsonify({'message': 'Code format updated successfully.', 'codeFormat': fmt.to_dict()}), 200


@code_formats_bp.route('/get-reciept-entry-code', methods=['POST'])
def get_receipt_entry_code():
    """
    Generate the next code for a code type and return it as a JSON string.

    Accepts {"codeType": 4} as well as the nested {"codeType": {"codeType": 4}}.
    """
    data = json_body()
    code_type = data.get('codeType')
    if isinstance(code_type, dict):
        code_type = code_type.get('codeType')

    code = code_service.generate_entry_code(get_session(), code_service.resolve_code_type(code_type))
    return jsonify(code), 200
