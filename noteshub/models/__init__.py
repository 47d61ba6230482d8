from noteshub.models.database import Base
from noteshub.models.account import Account
from noteshub.models.upload import Category, UploadRecord
from noteshub.models.vote import Vote, VoteDirection

__all__ = ["Base", "Account", "Category", "UploadRecord", "Vote", "VoteDirection"]
