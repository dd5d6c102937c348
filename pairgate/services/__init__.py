# Business Logic Services
from pairgate.services.chat_log import ChatLog, get_chat_log, reset_chat_log
from pairgate.services.pairing import (
    CODE_ALPHABET,
    CODE_LENGTH,
    issue_pair_code,
    verify_pair_code,
)
from pairgate.services.posts import create_post, delete_post, list_posts
from pairgate.services.visits import collect_stats, record_visit

__all__ = [
    "CODE_ALPHABET",
    "CODE_LENGTH",
    "ChatLog",
    "collect_stats",
    "create_post",
    "delete_post",
    "get_chat_log",
    "issue_pair_code",
    "list_posts",
    "record_visit",
    "reset_chat_log",
    "verify_pair_code",
]
