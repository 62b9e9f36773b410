"""
Debt Cases API Views

Endpoints:
- GET /api/debt-cases?q=&status=&source= - List with totals
- POST /api/debt-cases - Create a case
- PATCH /api/debt-cases/{id} - Update a case
- DELETE /api/debt-cases/{id} - Delete a case
"""
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.mixins import AuthenticatedAPIView
from apps.core.permissions import IsAuthenticated

from .selectors import debt_case_to_dict, get_debt_cases
from .services import create_debt_case, delete_debt_case, parse_debt_case_input, update_debt_case


class DebtCaseListCreateView(AuthenticatedAPIView, APIView):
    """GET/POST /api/debt-cases"""

    permission_classes = [IsAuthenticated]

    def get(self, request):
        user = self.get_user(request)
        result = get_debt_cases(
            user,
            search=request.query_params.get('q'),
            status=request.query_params.get('status') or None,
            source=request.query_params.get('source') or None,
        )
        return Response(result)

    def post(self, request):
        user = self.get_user(request)
        values = parse_debt_case_input(request.data)
        debt_case = create_debt_case(user, values)
        return Response({'ok': True, 'case': debt_case_to_dict(debt_case)}, status=status.HTTP_201_CREATED)


class DebtCaseDetailView(AuthenticatedAPIView, APIView):
    """PATCH/DELETE /api/debt-cases/{id}"""

    permission_classes = [IsAuthenticated]

    def patch(self, request, case_id):
        user = self.get_user(request)
        values = parse_debt_case_input(request.data, partial=True)
        debt_case = update_debt_case(self.parse_uuid(case_id, 'case_id'), user, values)
        return Response({'ok': True, 'case': debt_case_to_dict(debt_case)})

    def delete(self, request, case_id):
        user = self.get_user(request)
        delete_debt_case(self.parse_uuid(case_id, 'case_id'), user)
        return Response({'ok': True})
