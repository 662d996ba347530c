from django.contrib import admin
from .models import User, JobPoster, Freelancer, FreelancerSkill

@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('username', 'email', 'phone_number', 'is_job_poster', 'is_freelancer', 'is_superuser')
    list_filter = ('is_superuser',)
    search_fields = ('username', 'email', 'phone_number')

@admin.register(JobPoster)
class JobPosterAdmin(admin.ModelAdmin):
    list_display = ('user', 'company_name', 'money_spent')
    search_fields = ('user__username', 'user__email')
    readonly_fields = ('money_spent',)

@admin.register(Freelancer)
class FreelancerAdmin(admin.ModelAdmin):
    list_display = ('user', 'money_earned')
    search_fields = ('user__username', 'user__email')
    readonly_fields = ('money_earned',)

@admin.register(FreelancerSkill)
class FreelancerSkillAdmin(admin.ModelAdmin):
    list_display = ('freelancer', 'name')
    search_fields = ('freelancer__user__username', 'name')
