from db.shared_repositories import content_repository
from middlewares.identify import identify
from routes import route
from utils import Response, use
from utils.units import format_bytes


@route('/storage', 'GET')
@use(identify)
def get_storage_usage(event, response: Response):
    """Storage used by uploaded videos and thumbnails against the quota.
    ---
    tags:
        - storage
    responses:
        200:
            description: Storage usage in bytes, with human readable labels
    """
    with content_repository.create_session() as session:
        usage = session.storage_usage()
    return response.json({
        'success': True,
        'storage': {
            **usage.model_dump(),
            'used_label': format_bytes(usage.used),
            'available_label': format_bytes(usage.available)
        }
    })
