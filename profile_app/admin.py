from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.contrib.auth.models import User
from .models import OwnerRequest, Profile

# Register your models here.


class ProfileInline(admin.StackedInline):
    model = Profile
    can_delete = False
    verbose_name_plural = 'Profile'
    fk_name = 'user'


class CustomUserAdmin(BaseUserAdmin):
    inlines = (ProfileInline,)

    def get_profile_role(self, instance):
        return instance.profile.role
    get_profile_role.short_description = 'Role'

    def get_profile_name(self, instance):
        return instance.profile.full_name
    get_profile_name.short_description = 'Display name'

    list_display = ('username', 'email', 'is_staff', 'get_profile_name', 'get_profile_role')

    search_fields = BaseUserAdmin.search_fields + ('profile__full_name',)


class OwnerRequestAdmin(admin.ModelAdmin):
    list_display = ('id', 'business_name', 'user', 'status', 'reviewed_by', 'created_at')
    list_filter = ('status',)
    # Decisions go through the moderation endpoints so they are audited.
    readonly_fields = ('status', 'rejection_reason', 'reviewed_at', 'reviewed_by')


admin.site.unregister(User)
admin.site.register(User, CustomUserAdmin)
admin.site.register(OwnerRequest, OwnerRequestAdmin)
