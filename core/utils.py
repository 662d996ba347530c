from rest_framework import permissions


class IsJobPoster(permissions.BasePermission):
    message = 'Only job posters can access this endpoint.'

    def has_permission(self, request, view):
        if not request.user.is_authenticated:
            return False
        return hasattr(request.user, 'job_poster')


class IsFreelancer(permissions.BasePermission):
    message = 'Only freelancers can access this endpoint.'

    def has_permission(self, request, view):
        if not request.user.is_authenticated:
            return False
        return hasattr(request.user, 'freelancer')
