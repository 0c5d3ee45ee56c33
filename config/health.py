from django.db import DatabaseError, connection
from drf_spectacular.utils import OpenApiExample, extend_schema
from rest_framework import status
from rest_framework.decorators import api_view, throttle_classes
from rest_framework.response import Response


@extend_schema(
    tags=["Health Endpoint"],
    summary="Health check",
    description="Reports whether the ledger database answers a trivial query.",
    examples=[
        OpenApiExample("Healthy", value={"status": "ok", "database": "ok"}),
        OpenApiExample("Degraded", value={"status": "degraded", "database": "unavailable"}, status_codes=["503"]),
    ],
)
@api_view(["GET"])
@throttle_classes([])
def health(request):
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
    except DatabaseError:
        return Response({"status": "degraded", "database": "unavailable"}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
    return Response({"status": "ok", "database": "ok"})
