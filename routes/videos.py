import base64
import binascii
import logging
from pydantic import BaseModel, field_validator
from db.shared_repositories import content_repository
from errors import NotFoundError, PartialFailureError, UnauthorizedError, ValidationFailedError
from middlewares.identify import identify, identify_optional
from models.content_item import ContentDraft
from routes import parse_input, route
from utils import Response, use
from utils.catalog.view import order_items
from utils.catalog.window import CatalogWindow, page_size_for_width
from utils.units import format_bytes

logger = logging.getLogger(__name__)


class FileUpload(BaseModel):
    filename: str
    content_type: str
    data: str

    def decode(self) -> bytes:
        try:
            return base64.b64decode(self.data, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValidationFailedError(f"{self.filename} is not valid base64 data") from e


class VideoFile(FileUpload):
    @field_validator('content_type')
    @classmethod
    def must_be_video(cls, value: str) -> str:
        if not value.startswith('video/'):
            raise ValueError('Please select a valid video file')
        return value


class ImageFile(FileUpload):
    @field_validator('content_type')
    @classmethod
    def must_be_image(cls, value: str) -> str:
        if not value.startswith('image/'):
            raise ValueError('Please select a valid image file')
        return value


class UploadRequest(ContentDraft):
    video: VideoFile
    thumbnail: ImageFile | None = None


def _int_param(params: dict, name: str, default: int | None = None) -> int | None:
    value = params.get(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValidationFailedError(f"{name} must be an integer")


@route('/videos', 'GET')
@use(identify_optional)
def list_videos(event, response: Response):
    """List the videos visible to the caller, newest first.

    Public videos are listed for everyone, private videos only for their owner.
    When a viewport width is given, only one window of the catalog is returned.
    ---
    tags:
        - videos
    parameters:
        - in: query
          name: width
          required: false
          schema:
              type: integer
          description: Viewport width in pixels, selects the number of videos per page
        - in: query
          name: page
          required: false
          schema:
              type: integer
          description: Zero-based page to return, clamped to the last page
    responses:
        200:
            description: The visible videos
            content:
                application/json:
                    schema:
                        type: object
                        properties:
                            success:
                                type: boolean
                            videos:
                                type: array
                                items:
                                    $ref: '#/components/schemas/ContentItem'
                            pagination:
                                type: object
    """
    identity = event.get('identity')
    caller_id = identity['user_id'] if identity else None
    params = event.get('queryStringParameters') or {}
    with content_repository.create_session() as session:
        videos = order_items(session.list_visible(caller_id))

    width = _int_param(params, 'width')
    if width is None:
        return response.json({
            'success': True,
            'videos': [video.model_dump(mode='json') for video in videos],
            'total': len(videos)
        })

    window = CatalogWindow(videos, page_size=page_size_for_width(width))
    window.jump_to_page(_int_param(params, 'page', 0))
    return response.json({
        'success': True,
        'videos': [video.model_dump(mode='json') for video in window.visible()],
        'total': len(videos),
        'pagination': {
            'offset': window.offset,
            'page_size': window.page_size,
            'current_page': window.current_page,
            'total_pages': window.total_pages
        }
    })


@route('/videos', 'POST')
@use(identify)
def upload_video(event, response: Response):
    """Upload a video with its metadata and an optional thumbnail.
    ---
    tags:
        - videos
    requestBody:
        required: true
        content:
            application/json:
                schema:
                    type: object
                    properties:
                        title:
                            type: string
                        description:
                            type: string
                        category:
                            type: string
                        duration_label:
                            type: string
                        visibility:
                            type: string
                            enum: [public, private]
                        video:
                            $ref: '#/components/schemas/FileUpload'
                        thumbnail:
                            $ref: '#/components/schemas/FileUpload'
    responses:
        201:
            description: Video uploaded
        400:
            description: Invalid upload
        413:
            description: Not enough storage left
    """
    upload = parse_input(UploadRequest, event.get('body'))
    identity = event['identity']
    video_body = upload.video.decode()
    thumbnail = None
    if upload.thumbnail is not None:
        thumbnail = {
            'body': upload.thumbnail.decode(),
            'filename': upload.thumbnail.filename,
            'content_type': upload.thumbnail.content_type,
        }
    draft = ContentDraft.model_validate(upload.model_dump(include=set(ContentDraft.model_fields)))

    with content_repository.create_session() as session:
        if not session.check_storage_limit(len(video_body) + len(thumbnail['body'] if thumbnail else b'')):
            available = session.storage_usage().available
            return response.status(413).json({
                'success': False,
                'comment': 'STORAGE_LIMIT_EXCEEDED',
                'error': f"File too large. Only {format_bytes(available)} available."
            })
        try:
            video = session.upload_with_thumbnail(
                identity['user_id'],
                {'body': video_body, 'filename': upload.video.filename, 'content_type': upload.video.content_type},
                draft,
                thumbnail=thumbnail,
            )
        except PartialFailureError as e:
            logger.warning(f"Upload by {identity['user_id']} partially failed: {e.message}")
            return response.status(201).json({
                'success': True,
                'video': e.result.model_dump(mode='json'),
                'warning': 'Video uploaded, but the thumbnail could not be saved'
            })
    return response.status(201).json({
        'success': True,
        'video': video.model_dump(mode='json')
    })


@route('/videos/{video_id}', 'GET')
@use(identify_optional)
def get_video(event, response: Response):
    """Retrieve one video with fresh signed URLs.
    ---
    tags:
        - videos
    responses:
        200:
            description: The video
        404:
            description: Video not found, or private and not owned by the caller
    """
    identity = event.get('identity')
    video_id = event['pathParameters']['video_id']
    with content_repository.create_session() as session:
        video = session.get_content(video_id)
    if not video.visible_to(identity['user_id'] if identity else None):
        raise NotFoundError(f"Content {video_id} not found")
    return response.json({
        'success': True,
        'video': video.model_dump(mode='json')
    })


@route('/videos/{video_id}/thumbnail', 'PUT')
@use(identify)
def attach_thumbnail(event, response: Response):
    """Attach (or replace) the thumbnail of one of the caller's videos.
    ---
    tags:
        - videos
    requestBody:
        required: true
        content:
            application/json:
                schema:
                    $ref: '#/components/schemas/FileUpload'
    responses:
        200:
            description: Thumbnail attached
        403:
            description: The caller does not own the video
        404:
            description: Video not found
    """
    image = parse_input(ImageFile, event.get('body'))
    video_id = event['pathParameters']['video_id']
    with content_repository.create_session() as session:
        if session.get_content(video_id).owner_id != event['identity']['user_id']:
            raise UnauthorizedError("Only the owner can change this thumbnail")
        video = session.attach_thumbnail(video_id, image.decode(), image.filename, image.content_type)
    return response.json({
        'success': True,
        'video': video.model_dump(mode='json')
    })


@route('/videos/{video_id}', 'DELETE')
@use(identify)
def delete_video(event, response: Response):
    """Delete one of the caller's videos, its thumbnail and its metadata.
    ---
    tags:
        - videos
    responses:
        200:
            description: Video deleted
        403:
            description: The caller does not own the video
        404:
            description: Video not found
    """
    video_id = event['pathParameters']['video_id']
    with content_repository.create_session() as session:
        session.delete_content(video_id, event['identity']['user_id'])
    return {'success': True}
