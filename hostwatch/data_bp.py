from flask import Blueprint, Response, current_app, request

data_bp = Blueprint('data', __name__)


def _parse_since(raw) -> int:
    # Missing, malformed or negative values all mean "from the beginning"
    try:
        since = int(raw) if raw is not None else 0
    except (TypeError, ValueError):
        return 0
    return max(since, 0)


@data_bp.route('/data')
def get_data():
    """Return every stored snapshot newer than ``?since=<ms>`` as a JSON array."""
    store = current_app.extensions['hostwatch']['store']
    since = _parse_since(request.args.get('since'))
    return Response(store.query_since(since), mimetype='application/json')
