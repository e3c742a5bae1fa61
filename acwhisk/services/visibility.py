"""
Feed visibility rules.

A post is visible to a viewer when, in order of precedence:
1. the viewer wrote it (any privacy)
2. its privacy is ``public``
3. its privacy is ``followers`` and the viewer follows the author
Private posts are never visible to anyone but the author.
"""

from typing import Collection, Iterable, List

from acwhisk.models.post import Post, PostPrivacy


def is_visible(post: Post, viewer_id: str, viewer_following: Collection[str]) -> bool:
    if viewer_id and post.author_id == viewer_id:
        return True

    privacy = post.privacy or PostPrivacy.PUBLIC
    if privacy == PostPrivacy.PUBLIC:
        return True
    if privacy == PostPrivacy.FOLLOWERS:
        return post.author_id in viewer_following
    return False


def filter_visible(
    posts: Iterable[Post], viewer_id: str, viewer_following: Collection[str]
) -> List[Post]:
    """Return the visible subset, preserving input order."""
    following = set(viewer_following)
    return [post for post in posts if is_visible(post, viewer_id, following)]
