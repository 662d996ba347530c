from django.contrib import admin
from .models import Payment

@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ('job', 'amount', 'payer', 'payee', 'status', 'created_at')
    list_filter = ('status',)
    search_fields = ('job__title', 'payer__username', 'payee__username')
    readonly_fields = ('job', 'bid', 'amount', 'payer', 'payee', 'status', 'created_at')
