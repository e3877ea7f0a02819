"""
Index controller
"""
from ..mvc.controller import Controller


class IndexController(Controller):

    def index_action(self):
        config = self.get_service("config")
        return {
            "app": config.path("app.name", "keel"),
            "services": self.get_di().names(),
        }
