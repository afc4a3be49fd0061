from rest_framework import status as http_status
from rest_framework.response import Response


def envelope(message, data=None, status='success', http_code=http_status.HTTP_200_OK):
    return Response({'status': status, 'message': message, 'data': data}, status=http_code)


def created(message, data=None):
    return envelope(message, data, http_code=http_status.HTTP_201_CREATED)


def batch_response(outcome):
    """Render a BatchOutcome; a batch with no successes at all is a 400."""
    http_code = http_status.HTTP_200_OK
    if outcome.status == 'error':
        http_code = http_status.HTTP_400_BAD_REQUEST
    return envelope(outcome.message, outcome.as_dict(), status=outcome.status, http_code=http_code)
