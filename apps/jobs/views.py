from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi
from core.callers import AuthenticatedCaller
from core.utils import IsJobPoster, IsFreelancer
from apps.payments.serializers import PaymentSerializer
from . import bidding, ledger
from .serializers import (
    JobSerializer, JobCreateSerializer, JobUpdateSerializer, JobFilterSerializer,
    BidSerializer, MyBidSerializer, BidApplySerializer, BidCreateSerializer,
    ApplicationSerializer, BidDecisionSerializer,
)
import logging

logger = logging.getLogger(__name__)

JOB_FILTER_PARAMETERS = [
    openapi.Parameter('keyword', openapi.IN_QUERY, type=openapi.TYPE_STRING,
                      description='Case-insensitive match on title or description'),
    openapi.Parameter('minBudget', openapi.IN_QUERY, type=openapi.TYPE_NUMBER),
    openapi.Parameter('maxBudget', openapi.IN_QUERY, type=openapi.TYPE_NUMBER),
    openapi.Parameter('skills', openapi.IN_QUERY, type=openapi.TYPE_STRING,
                      description='Comma separated; a job matches if it requires any of them'),
]


def _job_filters(request):
    serializer = JobFilterSerializer(data=request.query_params)
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data


class JobCreateView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Create a new job. Deadline is a number of days from today (1-10).",
        request_body=JobCreateSerializer,
        responses={201: JobSerializer, 400: 'Bad Request', 401: 'Unauthorized'}
    )
    def post(self, request):
        serializer = JobCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        data = serializer.validated_data
        job = ledger.create_job(
            AuthenticatedCaller.from_user(request.user),
            title=data['title'],
            description=data['description'],
            budget=data['budget'],
            deadline_days=data['deadline'],
            skills=data['skills_required'],
        )
        return Response(JobSerializer(job).data, status=status.HTTP_201_CREATED)


class JobListView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="List jobs. Only open jobs unless a status filter is given; filters combine with AND.",
        manual_parameters=JOB_FILTER_PARAMETERS + [
            openapi.Parameter('status', openapi.IN_QUERY, type=openapi.TYPE_STRING),
        ],
        responses={200: JobSerializer(many=True), 400: 'Bad Request', 401: 'Unauthorized'}
    )
    def get(self, request):
        jobs = ledger.list_jobs(_job_filters(request))
        return Response(JobSerializer(jobs, many=True).data)


class JobDetailView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Retrieve a job by id.",
        responses={200: JobSerializer, 401: 'Unauthorized', 404: 'Not Found'}
    )
    def get(self, request, id):
        return Response(JobSerializer(ledger.get_job(id)).data)


class JobUpdateView(APIView):
    permission_classes = [IsAuthenticated, IsJobPoster]

    @swagger_auto_schema(
        operation_description="Partially update an open job you posted. Only the fields sent are changed.",
        request_body=JobUpdateSerializer,
        responses={200: JobSerializer, 400: 'Bad Request', 401: 'Unauthorized', 403: 'Forbidden', 404: 'Not Found'}
    )
    def patch(self, request, id):
        serializer = JobUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        job = ledger.update_job(id, AuthenticatedCaller.from_user(request.user), dict(serializer.validated_data))
        return Response(JobSerializer(job).data)


class JobCloseView(APIView):
    permission_classes = [IsAuthenticated, IsJobPoster]

    @swagger_auto_schema(
        operation_description="Cancel an open job you posted.",
        responses={200: JobSerializer, 400: 'Bad Request', 401: 'Unauthorized', 403: 'Forbidden', 404: 'Not Found'}
    )
    def patch(self, request, id):
        job = ledger.cancel_job(id, AuthenticatedCaller.from_user(request.user))
        return Response({'message': 'Job has been canceled', 'job': JobSerializer(job).data})


class JobCompleteView(APIView):
    permission_classes = [IsAuthenticated, IsJobPoster]

    @swagger_auto_schema(
        operation_description="Mark an in-progress job as completed and pay the accepted bid.",
        responses={
            200: openapi.Response(
                description='Completed job and its payment',
                schema=openapi.Schema(
                    type=openapi.TYPE_OBJECT,
                    properties={
                        'message': openapi.Schema(type=openapi.TYPE_STRING),
                        'job': openapi.Schema(type=openapi.TYPE_OBJECT),
                        'payment': openapi.Schema(type=openapi.TYPE_OBJECT),
                    }
                )
            ),
            400: 'Bad Request', 401: 'Unauthorized', 403: 'Forbidden', 404: 'Not Found'
        }
    )
    def patch(self, request, id):
        job, payment = ledger.complete_job(id, AuthenticatedCaller.from_user(request.user))
        return Response({
            'message': 'Job marked as completed and payment processed',
            'job': JobSerializer(job).data,
            'payment': PaymentSerializer(payment).data,
        })


class PostedJobsView(APIView):
    permission_classes = [IsAuthenticated, IsJobPoster]

    @swagger_auto_schema(
        operation_description="List the jobs posted by the authenticated job poster.",
        responses={200: JobSerializer(many=True), 401: 'Unauthorized', 403: 'Forbidden'}
    )
    def get(self, request):
        jobs = ledger.list_posted_jobs(AuthenticatedCaller.from_user(request.user))
        return Response(JobSerializer(jobs, many=True).data)


class AvailableJobsView(APIView):
    permission_classes = [IsAuthenticated, IsFreelancer]

    @swagger_auto_schema(
        operation_description="Open jobs the authenticated freelancer has not posted and not yet bid on.",
        manual_parameters=JOB_FILTER_PARAMETERS,
        responses={200: JobSerializer(many=True), 401: 'Unauthorized', 403: 'Forbidden'}
    )
    def get(self, request):
        jobs = ledger.list_open_jobs_for(AuthenticatedCaller.from_user(request.user), _job_filters(request))
        return Response(JobSerializer(jobs, many=True).data)


class MyApplicationsView(APIView):
    permission_classes = [IsAuthenticated, IsFreelancer]

    @swagger_auto_schema(
        operation_description="Jobs the authenticated freelancer bid on, with their bid and bid statistics.",
        responses={200: ApplicationSerializer(many=True), 401: 'Unauthorized', 403: 'Forbidden'}
    )
    def get(self, request):
        applications = bidding.list_my_applications(AuthenticatedCaller.from_user(request.user))
        return Response(ApplicationSerializer(applications, many=True).data)


class JobApplyView(APIView):
    permission_classes = [IsAuthenticated, IsFreelancer]

    @swagger_auto_schema(
        operation_description="Apply for an open job by placing a bid.",
        request_body=BidApplySerializer,
        responses={201: BidSerializer, 400: 'Bad Request', 401: 'Unauthorized', 403: 'Forbidden', 404: 'Not Found'}
    )
    def post(self, request, id):
        serializer = BidApplySerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        data = serializer.validated_data
        bid = bidding.submit_bid(
            id,
            AuthenticatedCaller.from_user(request.user),
            amount=data['amount'],
            delivery_time=data['delivery_time'],
            proposal=data['proposal'],
        )
        return Response(
            {'message': 'Application submitted successfully', 'bid': BidSerializer(bid).data},
            status=status.HTTP_201_CREATED
        )


class BidCreateView(APIView):
    permission_classes = [IsAuthenticated, IsFreelancer]

    @swagger_auto_schema(
        operation_description="Place a bid on an open job.",
        request_body=BidCreateSerializer,
        responses={201: BidSerializer, 400: 'Bad Request', 401: 'Unauthorized', 403: 'Forbidden', 404: 'Not Found'}
    )
    def post(self, request):
        serializer = BidCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        data = serializer.validated_data
        bid = bidding.submit_bid(
            data['job_id'],
            AuthenticatedCaller.from_user(request.user),
            amount=data['amount'],
            delivery_time=data['delivery_time'],
            proposal=data['proposal'],
        )
        return Response(BidSerializer(bid).data, status=status.HTTP_201_CREATED)


class JobBidsView(APIView):
    permission_classes = [IsAuthenticated, IsJobPoster]

    @swagger_auto_schema(
        operation_description="List every bid on a job you posted, newest first.",
        responses={200: BidSerializer(many=True), 401: 'Unauthorized', 403: 'Forbidden', 404: 'Not Found'}
    )
    def get(self, request, job_id):
        bids = bidding.list_bids_for_job(job_id, AuthenticatedCaller.from_user(request.user))
        return Response(BidSerializer(bids, many=True).data)


class MyBidsView(APIView):
    permission_classes = [IsAuthenticated, IsFreelancer]

    @swagger_auto_schema(
        operation_description="List the authenticated freelancer's bids, newest first.",
        responses={200: MyBidSerializer(many=True), 401: 'Unauthorized', 403: 'Forbidden'}
    )
    def get(self, request):
        bids = bidding.list_my_bids(AuthenticatedCaller.from_user(request.user))
        return Response(MyBidSerializer(bids, many=True).data)


class BidAcceptView(APIView):
    permission_classes = [IsAuthenticated, IsJobPoster]

    @swagger_auto_schema(
        operation_description="Accept a bid. Every other pending bid on the job is rejected and a chat is opened.",
        responses={200: BidDecisionSerializer, 400: 'Bad Request', 401: 'Unauthorized', 403: 'Forbidden', 404: 'Not Found'}
    )
    def patch(self, request, id):
        bid, job, chat = bidding.accept_bid(id, AuthenticatedCaller.from_user(request.user))
        return Response({
            'message': 'Bid accepted successfully',
            'bid': BidSerializer(bid).data,
            'job': JobSerializer(job).data,
            'chat_id': chat.id,
        })


class BidRejectView(APIView):
    permission_classes = [IsAuthenticated, IsJobPoster]

    @swagger_auto_schema(
        operation_description="Reject a pending bid on an open job you posted.",
        responses={200: BidDecisionSerializer, 400: 'Bad Request', 401: 'Unauthorized', 403: 'Forbidden', 404: 'Not Found'}
    )
    def patch(self, request, id):
        bid = bidding.reject_bid(id, AuthenticatedCaller.from_user(request.user))
        return Response({'message': 'Bid rejected successfully', 'bid': BidSerializer(bid).data})
