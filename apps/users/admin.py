from django.contrib import admin
from .models import CustomUser


@admin.register(CustomUser)
class CustomUserAdmin(admin.ModelAdmin):
    list_display = ['email', 'name', 'phone', 'role', 'is_active', 'date_joined']
    list_filter = ['role', 'is_active']
    search_fields = ['email', 'name', 'phone']
    readonly_fields = ['date_joined', 'last_login']
    ordering = ['-date_joined']
    exclude = ['password']
