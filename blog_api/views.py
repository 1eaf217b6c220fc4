"""
Views for blog_api.

Every response is JSON with a ``success`` flag and a ``message``. Errors are
raised as blog_api.exceptions and rendered by JsonErrorMiddleware.
"""
import json

from django.http import JsonResponse, QueryDict
from django.http.multipartparser import MultiPartParser, MultiPartParserError
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from .auth import TokenRequiredMixin, authenticate_request
from .exceptions import AuthorizationError, ValidationError
from .serializers import comment_to_dict, post_to_dict, user_to_dict
from .services import get_services

# Request keys accepted for model fields (camelCase as sent by the web client).
USER_KEYS = {
    "firstName": "first_name",
    "lastName": "last_name",
    "occupation": "occupation",
    "bio": "bio",
    "instagram": "instagram",
    "facebook": "facebook",
    "linkedin": "linkedin",
    "github": "github",
}
POST_KEYS = {
    "title": "title",
    "subtitle": "subtitle",
    "description": "description",
    "category": "category",
}


def parse_body(request):
    """
    Return (data, files) for JSON, urlencoded and multipart bodies.

    Django only parses form bodies on POST; PUT/PATCH multipart bodies are
    run through MultiPartParser here, streamed from the request so files go
    to the upload handlers and only the other fields count against
    DATA_UPLOAD_MAX_MEMORY_SIZE.
    """
    content_type = request.content_type or ""
    if content_type == "application/json":
        try:
            data = json.loads(request.body or b"{}")
        except ValueError:
            raise ValidationError("Malformed JSON body")
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object")
        return data, {}

    if request.method == "POST":
        return request.POST, request.FILES

    if content_type == "multipart/form-data":
        parser = MultiPartParser(
            request.META,
            request,
            request.upload_handlers,
            request.encoding,
        )
        try:
            return parser.parse()
        except MultiPartParserError:
            raise ValidationError("Malformed multipart body")

    return QueryDict(request.body, encoding=request.encoding), {}


def pick(data, keys):
    """Map accepted request keys to model field names, skipping absent ones."""
    return {field: data.get(key) for key, field in keys.items() if key in data}


def ok(message, status=200, **payload):
    return JsonResponse({"success": True, "message": message, **payload}, status=status)


class ApiView(View):
    """Base view; cookie sessions rely on SameSite=Strict, not CSRF tokens."""

    @classmethod
    def as_view(cls, **initkwargs):
        return csrf_exempt(super().as_view(**initkwargs))

    @property
    def services(self):
        return get_services()


# ---------------------------------------------------------------- users


class UsersView(ApiView):
    """POST registers an account; GET lists every user (staff only)."""

    def post(self, request):
        data, _ = parse_body(request)
        self.services.users.register(
            data.get("firstName"),
            data.get("lastName"),
            data.get("email"),
            data.get("password"),
        )
        return ok("Account Created Successfully", status=201)

    def get(self, request):
        user = authenticate_request(request)
        if not user.is_staff:
            raise AuthorizationError("Admin access required")
        users = self.services.users.list_all()
        return ok(
            "User list fetched successfully",
            total=len(users),
            users=[user_to_dict(u) for u in users],
        )


class LoginView(ApiView):
    def post(self, request):
        data, _ = parse_body(request)
        user, token = self.services.users.login(data.get("email"), data.get("password"))
        response = ok(f"Welcome back {user.first_name}", user=user_to_dict(user))
        return self.services.tokens.set_cookie(response, token)


class LogoutView(ApiView):
    def post(self, request):
        response = ok("Logged out successfully.")
        return self.services.tokens.clear_cookie(response)


class ProfileView(TokenRequiredMixin, ApiView):
    def put(self, request):
        data, files = parse_body(request)
        user = self.services.users.update_profile(
            request.user.pk,
            pick(data, USER_KEYS),
            avatar=files.get("file"),
        )
        return ok("Profile updated successfully", user=user_to_dict(user))

    post = put


class MyLikesView(TokenRequiredMixin, ApiView):
    def get(self, request):
        totals = self.services.posts.aggregate_likes_for_author(request.user.pk)
        return ok(
            "Total blog likes fetched",
            totalBlogs=totals["total_blogs"],
            totalLikes=totals["total_likes"],
        )


# ---------------------------------------------------------------- posts


class PostsView(ApiView):
    """GET lists every post; POST creates one for the signed-in user."""

    def get(self, request):
        posts = self.services.posts.list_all()
        return ok("Blogs fetched", blogs=[post_to_dict(p) for p in posts])

    def post(self, request):
        user = authenticate_request(request)
        data, _ = parse_body(request)
        post = self.services.posts.create(
            data.get("title"),
            data.get("category"),
            user.pk,
            subtitle=data.get("subtitle"),
            description=data.get("description"),
        )
        return ok("Blog Created Successfully.", status=201, blog=post_to_dict(post))


class PublishedPostsView(ApiView):
    def get(self, request):
        posts = self.services.posts.list_published()
        return ok("Published blogs fetched", blogs=[post_to_dict(p) for p in posts])


class MyPostsView(TokenRequiredMixin, ApiView):
    def get(self, request):
        posts = self.services.posts.list_by_author(request.user.pk)
        return ok("Your blogs fetched", blogs=[post_to_dict(p) for p in posts])


class PostDetailView(ApiView):
    """GET shows a post; PUT edits it and DELETE removes it (author only)."""

    def get(self, request, pk):
        post = self.services.posts.get(pk)
        return ok("Blog fetched", blog=post_to_dict(post))

    def put(self, request, pk):
        user = authenticate_request(request)
        data, files = parse_body(request)
        post = self.services.posts.update(
            pk,
            pick(data, POST_KEYS),
            thumbnail=files.get("file"),
            requester_id=user.pk,
        )
        return ok("Blog updated successfully", blog=post_to_dict(post))

    def delete(self, request, pk):
        user = authenticate_request(request)
        self.services.posts.delete(pk, user.pk)
        return ok("Blog deleted successfully")


class PublishToggleView(TokenRequiredMixin, ApiView):
    def patch(self, request, pk):
        published = self.services.posts.toggle_publish(pk, requester_id=request.user.pk)
        status = "Published" if published else "Unpublished"
        return ok(f"Blog is {status}")


class LikeView(TokenRequiredMixin, ApiView):
    def get(self, request, pk):
        post = self.services.posts.like(pk, request.user.pk)
        return ok("Blog liked", blog=post_to_dict(post))

    post = get


class DislikeView(TokenRequiredMixin, ApiView):
    def get(self, request, pk):
        post = self.services.posts.unlike(pk, request.user.pk)
        return ok("Blog disliked", blog=post_to_dict(post))

    post = get


# ---------------------------------------------------------------- comments


class PostCommentsView(ApiView):
    def get(self, request, pk):
        comments = self.services.comments.list_by_post(pk)
        return ok(
            "Comments fetched",
            total=len(comments),
            comments=[comment_to_dict(c) for c in comments],
        )

    def post(self, request, pk):
        user = authenticate_request(request)
        data, _ = parse_body(request)
        comment = self.services.comments.create(pk, user.pk, data.get("content"))
        return ok("Comment Added", status=201, comment=comment_to_dict(comment))


class CommentDetailView(TokenRequiredMixin, ApiView):
    def delete(self, request, pk):
        self.services.comments.delete(pk, request.user.pk)
        return ok("Comment deleted")
