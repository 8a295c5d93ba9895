"""
WASM Bytecode Scanner Flask Server

Features:
- Module inspection (ABI version, sections, function names)
- Custom section download
- Precompiled section stripping
- JSON error responses for malformed modules
"""

import os
from io import BytesIO
from typing import Optional, Tuple
from flask import Flask, request, jsonify, send_file, Response

from werkzeug.utils import secure_filename

from wasm_bytecode_scanner import __version__
from wasm_bytecode_scanner.config import Config
from wasm_bytecode_scanner.errors import BytecodeError
from wasm_bytecode_scanner.formats.bytecode_scanner import (
    detect_abi_version, list_sections, find_custom_section,
    extract_function_names, strip_precompiled_sections,
)
from wasm_bytecode_scanner.utils.string_utils import escape_name

app = Flask(__name__)

# Configuration
config = Config.load(None)
app.config['MAX_CONTENT_LENGTH'] = config.max_module_size


def read_upload() -> Tuple[Optional[bytes], str]:
    """Read the uploaded module. Returns (data, safe filename)."""
    upload = request.files.get('module')
    if upload is None:
        return None, ''
    filename = secure_filename(upload.filename or '') or 'module.wasm'
    return upload.read(), filename


def missing_module() -> Tuple[Response, int]:
    return jsonify({'error': 'No module provided (expected multipart field "module")'}), 400


# ============== Error Handlers ==============

@app.errorhandler(BytecodeError)
def handle_bytecode_error(e: BytecodeError):
    """Reject malformed modules."""
    return jsonify({'error': str(e), 'type': type(e).__name__}), 400


@app.errorhandler(413)
def handle_too_large(e):
    """Module exceeds MAX_CONTENT_LENGTH."""
    limit = app.config['MAX_CONTENT_LENGTH']
    return jsonify({'error': f'Module exceeds {limit // (1024 * 1024)}MB limit'}), 413


# ============== Routes ==============

@app.route('/api/health')
def health():
    return jsonify({'status': 'ok', 'version': __version__})


@app.route('/api/inspect', methods=['POST'])
def inspect_module():
    """Report the ABI version, section table and function names."""
    data, filename = read_upload()
    if data is None:
        return missing_module()

    sections = [
        {
            'id': section.id,
            'kind': section.kind,
            'name': section.name,
            'offset': section.offset,
            'size': section.size,
        }
        for section in list_sections(data)
    ]
    names = extract_function_names(data, config.name_section)

    return jsonify({
        'filename': filename,
        'size': len(data),
        'abi_version': detect_abi_version(data).label,
        'sections': sections,
        'function_names': {str(index): escape_name(name) for index, name in sorted(names.items())},
    })


@app.route('/api/strip', methods=['POST'])
def strip_module():
    """Return the module without precompiled sections."""
    data, filename = read_upload()
    if data is None:
        return missing_module()

    stripped = strip_precompiled_sections(data, config.precompiled_marker)
    name, ext = os.path.splitext(filename)
    return send_file(
        BytesIO(stripped),
        mimetype='application/wasm',
        as_attachment=True,
        download_name=f'{name}.stripped{ext or ".wasm"}'
    )


@app.route('/api/sections/<name>', methods=['POST'])
def get_section(name: str):
    """Return the payload of a custom section."""
    data, _ = read_upload()
    if data is None:
        return missing_module()

    payload = find_custom_section(data, name)
    if payload is None:
        return jsonify({'error': f'Custom section "{name}" not found'}), 404

    return Response(payload.tobytes(), mimetype='application/octet-stream')


if __name__ == '__main__':
    print("=" * 60)
    print(f"WASM Bytecode Scanner Server v{__version__}")
    print("=" * 60)
    print("Inspect: POST http://localhost:5000/api/inspect")
    print("=" * 60)

    app.run(host='0.0.0.0', port=5000, debug=False, threaded=True)
