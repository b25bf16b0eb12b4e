# PATH: apps/core/admin.py
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from apps.core.models import College, User


@admin.register(College)
class CollegeAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "code", "is_active")
    list_filter = ("is_active",)
    search_fields = ("name", "code")


@admin.register(User)
class CoreUserAdmin(UserAdmin):
    list_display = ("id", "username", "name", "role", "college", "is_active")
    list_filter = ("role", "college", "is_active")
    search_fields = ("username", "name", "email")

    fieldsets = UserAdmin.fieldsets + (
        ("Assessment", {"fields": ("name", "role", "college")}),
    )
