"""
URL configuration for blog_api.

Include in your project urls.py:

    path('api/v1/', include('blog_api.urls')),
"""
from django.urls import path

from . import views

app_name = "blog_api"

urlpatterns = [
    # Users
    path("users", views.UsersView.as_view(), name="users"),
    path("users/login", views.LoginView.as_view(), name="login"),
    path("users/logout", views.LogoutView.as_view(), name="logout"),
    path("users/profile", views.ProfileView.as_view(), name="profile"),
    path("users/me/likes", views.MyLikesView.as_view(), name="my_likes"),

    # Posts
    path("posts", views.PostsView.as_view(), name="posts"),
    path("posts/published", views.PublishedPostsView.as_view(), name="published_posts"),
    path("posts/mine", views.MyPostsView.as_view(), name="my_posts"),
    path("posts/<int:pk>", views.PostDetailView.as_view(), name="post_detail"),
    path("posts/<int:pk>/publish", views.PublishToggleView.as_view(), name="post_publish"),

    # Interactions
    path("posts/<int:pk>/like", views.LikeView.as_view(), name="post_like"),
    path("posts/<int:pk>/dislike", views.DislikeView.as_view(), name="post_dislike"),
    path("posts/<int:pk>/comments", views.PostCommentsView.as_view(), name="post_comments"),
    path("comments/<int:pk>", views.CommentDetailView.as_view(), name="comment_detail"),
]
