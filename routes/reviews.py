from db.shared_repositories import review_repository
from errors import ValidationFailedError
from middlewares.identify import identify
from models.review import ReplyInput, ReviewInput
from routes import parse_input, route
from utils import Response, use
from utils.rating import format_average, review_count_label, sort_reviews, star_count, summarize


def summary_json(summary) -> dict:
    return {
        **summary.model_dump(),
        'display': format_average(summary.average),
        'stars': star_count(summary.average),
        'label': review_count_label(summary.count)
    }


@route('/videos/{video_id}/reviews', 'GET')
def list_reviews(event, response: Response):
    """List the reviews of a video with their replies and the rating summary.
    ---
    tags:
        - reviews
    parameters:
        - in: query
          name: sort
          required: false
          schema:
              type: string
              enum: [recent, rating]
          description: Order of the reviews, newest first by default
    responses:
        200:
            description: The reviews of the video
            content:
                application/json:
                    schema:
                        type: object
                        properties:
                            success:
                                type: boolean
                            reviews:
                                type: array
                                items:
                                    $ref: '#/components/schemas/Review'
                            rating:
                                $ref: '#/components/schemas/RatingSummary'
    """
    video_id = event['pathParameters']['video_id']
    sort = (event.get('queryStringParameters') or {}).get('sort', 'recent')
    if sort not in ('recent', 'rating'):
        raise ValidationFailedError("sort must be 'recent' or 'rating'")
    with review_repository.create_session() as session:
        reviews = session.list_for_content(video_id)
    return response.json({
        'success': True,
        'reviews': [review.model_dump() for review in sort_reviews(reviews, by=sort)],
        'rating': summary_json(summarize(reviews))
    })


@route('/videos/{video_id}/rating', 'GET')
def get_rating(event, response: Response):
    """Average rating and number of reviews of a video.
    ---
    tags:
        - reviews
    responses:
        200:
            description: The rating summary
    """
    video_id = event['pathParameters']['video_id']
    with review_repository.create_session() as session:
        summary = session.average_rating(video_id)
    return response.json({
        'success': True,
        'rating': summary_json(summary)
    })


@route('/videos/{video_id}/reviews', 'POST')
@use(identify)
def create_review(event, response: Response):
    """Review a video with a rating from 1 to 5 and an optional comment.
    ---
    tags:
        - reviews
    requestBody:
        required: true
        content:
            application/json:
                schema:
                    type: object
                    properties:
                        rating:
                            type: integer
                            minimum: 1
                            maximum: 5
                        comment:
                            type: string
    responses:
        201:
            description: Review created
        400:
            description: Invalid rating
    """
    data = parse_input(ReviewInput, event.get('body'))
    identity = event['identity']
    with review_repository.create_session() as session:
        review = session.create_review(
            event['pathParameters']['video_id'],
            identity['user_id'],
            identity['email'],
            data.rating,
            data.comment
        )
    return response.status(201).json({
        'success': True,
        'review': review.model_dump()
    })


@route('/reviews/{review_id}', 'PUT')
@use(identify)
def update_review(event, response: Response):
    """Edit the rating and comment of one of the caller's reviews.
    ---
    tags:
        - reviews
    responses:
        200:
            description: Review updated
        403:
            description: The caller did not write the review
        404:
            description: Review not found
    """
    data = parse_input(ReviewInput, event.get('body'))
    with review_repository.create_session() as session:
        review = session.update_review(
            event['pathParameters']['review_id'],
            event['identity']['user_id'],
            data.comment,
            data.rating
        )
    return response.json({
        'success': True,
        'review': review.model_dump()
    })


@route('/reviews/{review_id}', 'DELETE')
@use(identify)
def delete_review(event, response: Response):
    """Delete one of the caller's reviews.
    ---
    tags:
        - reviews
    responses:
        200:
            description: Review deleted
        403:
            description: The caller did not write the review
        404:
            description: Review not found
    """
    with review_repository.create_session() as session:
        session.delete_review(event['pathParameters']['review_id'], event['identity']['user_id'])
    return {'success': True}


@route('/reviews/{review_id}/replies', 'POST')
@use(identify)
def add_reply(event, response: Response):
    """Reply to a review.
    ---
    tags:
        - reviews
    requestBody:
        required: true
        content:
            application/json:
                schema:
                    type: object
                    properties:
                        content:
                            type: string
    responses:
        201:
            description: Reply added, the whole review is returned
        404:
            description: Review not found
    """
    data = parse_input(ReplyInput, event.get('body'))
    identity = event['identity']
    with review_repository.create_session() as session:
        review = session.add_reply(
            event['pathParameters']['review_id'],
            identity['user_id'],
            identity['email'],
            data.content
        )
    return response.status(201).json({
        'success': True,
        'review': review.model_dump()
    })
