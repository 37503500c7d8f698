# lookups/views.py
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .services import get_lookup_service


class LookupCategoryListView(APIView):
    """GET /lookups/"""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        categories = get_lookup_service().get_all_categories()
        return Response({'categories': [category.to_dict() for category in categories]})


class LookupValueListView(APIView):
    """GET /lookups/<category_code>/values/ - always 200, empty when unavailable."""
    permission_classes = [IsAuthenticated]

    def get(self, request, category_code):
        values = get_lookup_service().fetch_values_by_category_code(category_code)
        return Response({
            'category': category_code,
            'values': [value.to_dict() for value in values],
        })


class CommonLookupsView(APIView):
    """GET /lookups/common/"""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        lookups = get_lookup_service().get_common_lookups()
        return Response({
            name: [value.to_dict() for value in values]
            for name, values in lookups.items()
        })
