from django.contrib import admin
from .models import Job, JobSkill, Bid


class JobSkillInline(admin.TabularInline):
    model = JobSkill
    extra = 0


@admin.register(Job)
class JobAdmin(admin.ModelAdmin):
    list_display = ('title', 'poster', 'budget', 'deadline', 'status', 'created_at')
    list_filter = ('status',)
    search_fields = ('title', 'description', 'poster__username')
    readonly_fields = ('selected_bid', 'completed_at')
    inlines = [JobSkillInline]


@admin.register(Bid)
class BidAdmin(admin.ModelAdmin):
    list_display = ('job', 'freelancer', 'amount', 'delivery_time', 'status', 'created_at')
    list_filter = ('status',)
    search_fields = ('job__title', 'freelancer__username')
