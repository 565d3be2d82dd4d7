from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from role_user_manager.models import Option, PromotionRequest, Role, User, UserMeta, UserRole


class UserRoleInline(admin.TabularInline):
    model = UserRole
    extra = 0


class UserMetaInline(admin.TabularInline):
    model = UserMeta
    extra = 0


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ["username", "display_name", "email", "is_active", "is_staff", "date_joined"]
    search_fields = ["username", "display_name", "email"]
    fieldsets = BaseUserAdmin.fieldsets + (("Display", {"fields": ("display_name",)}),)
    inlines = [UserRoleInline, UserMetaInline]


@admin.register(Role)
class RoleAdmin(admin.ModelAdmin):
    list_display = ["name", "display_name", "parent"]
    search_fields = ["name", "display_name"]


@admin.register(Option)
class OptionAdmin(admin.ModelAdmin):
    list_display = ["name"]
    search_fields = ["name"]


@admin.register(PromotionRequest)
class PromotionRequestAdmin(admin.ModelAdmin):
    list_display = ["user", "current_role", "requested_role", "status", "requester", "created_at"]
    list_filter = ["status", "requested_role"]
    search_fields = ["user__username", "requester__username"]
    readonly_fields = ["created_at", "processed_at", "processed_by"]
