"""
Django admin configuration for blog_api.
"""
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.contrib.auth.forms import BaseUserCreationForm, UserChangeForm as BaseUserChangeForm

from .models import Comment, Post, User


class CommentInline(admin.TabularInline):
    """Inline for reviewing comments on a post."""

    model = Comment
    extra = 0
    raw_id_fields = ["user"]
    fields = ["user", "content", "created_at"]
    readonly_fields = ["created_at"]


class UserCreationForm(BaseUserCreationForm):
    class Meta:
        model = User
        fields = ("email", "first_name", "last_name")


class UserChangeForm(BaseUserChangeForm):
    class Meta:
        model = User
        fields = "__all__"


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    form = UserChangeForm
    add_form = UserCreationForm
    list_display = ["email", "first_name", "last_name", "is_staff", "is_active", "date_joined"]
    list_filter = ["is_staff", "is_active"]
    search_fields = ["email", "first_name", "last_name"]
    ordering = ["-date_joined"]
    readonly_fields = ["photo_key", "date_joined", "last_login"]

    fieldsets = (
        (None, {"fields": ("email", "password")}),
        ("Name", {"fields": ("first_name", "last_name")}),
        ("Profile", {
            "fields": (
                "occupation",
                "bio",
                "photo_url",
                "photo_key",
                "instagram",
                "facebook",
                "linkedin",
                "github",
            )
        }),
        ("Permissions", {
            "fields": ("is_active", "is_staff", "is_superuser", "groups", "user_permissions"),
            "classes": ("collapse",),
        }),
        ("Dates", {"fields": ("last_login", "date_joined")}),
    )
    add_fieldsets = (
        (None, {
            "classes": ("wide",),
            "fields": ("email", "first_name", "last_name", "password1", "password2"),
        }),
    )


@admin.register(Post)
class PostAdmin(admin.ModelAdmin):
    list_display = ["title_preview", "author", "category", "is_published", "like_count", "created_at"]
    list_filter = ["is_published", "category", "created_at"]
    search_fields = ["title", "subtitle", "description", "author__email"]
    raw_id_fields = ["author"]
    filter_horizontal = ["likes"]
    date_hierarchy = "created_at"
    inlines = [CommentInline]
    readonly_fields = ["thumbnail_key", "created_at", "updated_at"]
    actions = ["publish_posts", "unpublish_posts"]

    def title_preview(self, obj):
        """Truncated title for list display."""
        return obj.title[:60] + "..." if len(obj.title) > 60 else obj.title

    title_preview.short_description = "Title"

    def like_count(self, obj):
        return obj.likes.count()

    like_count.short_description = "Likes"

    @admin.action(description="Publish selected posts")
    def publish_posts(self, request, queryset):
        updated = queryset.update(is_published=True)
        self.message_user(request, f"{updated} posts published.")

    @admin.action(description="Unpublish selected posts")
    def unpublish_posts(self, request, queryset):
        updated = queryset.update(is_published=False)
        self.message_user(request, f"{updated} posts unpublished.")


@admin.register(Comment)
class CommentAdmin(admin.ModelAdmin):
    list_display = ["preview", "user", "post", "created_at"]
    list_filter = ["created_at"]
    search_fields = ["content", "user__email", "post__title"]
    raw_id_fields = ["post", "user"]
    readonly_fields = ["created_at"]
