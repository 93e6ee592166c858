import time

from flask import current_app, jsonify

from orderdesk.core.gateway import EXTENSION_KEY
from orderdesk.core.logging_service import LoggingService
from orderdesk.modules.setup.bootstrap import BOOTSTRAP_FLAG
from . import ops_health_bp

_STARTED_AT = time.time()


def _get_uptime():
    seconds = int(time.time() - _STARTED_AT)
    hours, remainder = divmod(seconds, 3600)
    minutes, _ = divmod(remainder, 60)
    return {'seconds': seconds, 'display': f'{hours}h {minutes}m'}


@ops_health_bp.route('', methods=['GET'])
def health():
    """Health check for uptime monitors; always 200"""
    gateway = current_app.extensions.get(EXTENSION_KEY)
    configured = bool(gateway and gateway.configured)
    bootstrap = current_app.extensions.get(BOOTSTRAP_FLAG, 'not_run')
    errors_last_hour = LoggingService.count_errors_since(hours=1)

    status = 'ok'
    if not configured or bootstrap == 'failed' or errors_last_hour:
        status = 'warning'

    return jsonify({
        'status': status,
        'checks': {
            'gateway': {'configured': configured},
            'bootstrap': bootstrap,
            'errors_last_hour': errors_last_hour,
            'uptime': _get_uptime(),
        }
    })
