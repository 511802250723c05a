import logging

from database import get_supabase
from services.bible_repository import remote_call
from services.errors import BibleException

logger = logging.getLogger(__name__)


class PremiumService:
    """Answers whether a user holds a premium subscription.

    Asked once per gated action; the answer is not cached.
    """

    def __init__(self, client_getter=get_supabase):
        self._client_getter = client_getter

    def is_premium(self, user_id):
        if not user_id:
            return False
        try:
            with remote_call("check premium status"):
                response = self._client_getter().table('users') \
                    .select('is_premium') \
                    .eq('id', user_id) \
                    .limit(1) \
                    .execute()
        except BibleException as e:
            logger.error(f"Premium check failed for {user_id}: {e}")
            return False

        if not response.data:
            logger.info(f"No user record for {user_id}; treating as free tier")
            return False
        return bool(response.data[0].get('is_premium'))
