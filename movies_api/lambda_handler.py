"""AWS Lambda handler for the Movies Open API.

Wraps the FastAPI application with the Mangum adapter so it can run
behind API Gateway. Tables are provisioned out of band on Lambda
(infrastructure/dynamodb_tables.py), so the ASGI lifespan is disabled.

Rate limit counters live in each Lambda execution environment and are not
shared between concurrent instances.
"""

from mangum import Mangum

from movies_api.main import app

handler = Mangum(app, lifespan="off")


def lambda_handler(event: dict, context: object) -> dict:
    """
    AWS Lambda function handler.

    Args:
        event: API Gateway event containing request details
        context: Lambda context object with runtime information

    Returns:
        API Gateway response dict with statusCode, headers, and body
    """
    return handler(event, context)
