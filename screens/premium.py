from screens.navigator import Screen

FEATURE_TITLES = {
    'bookmarks': 'Bookmarks',
    'highlights': 'Highlights',
    'notes': 'Study notes',
    'ai_chat': 'AI Bible Chat',
}


class PremiumUpsellScreen(Screen):
    route_name = 'premium_upsell'

    def __init__(self, feature):
        super().__init__()
        self.feature = feature

    @property
    def title(self):
        return f"{FEATURE_TITLES.get(self.feature, self.feature)} - Premium Feature"

    def render(self):
        return {
            "route": self.route_name,
            "feature": self.feature,
            "title": self.title,
            "message": "This feature is available to premium subscribers. "
                       "Upgrade to unlock it on all your devices.",
        }
