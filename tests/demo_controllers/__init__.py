"""
Controllers used by the dispatcher and HTTP tests (namespace "demo")
"""
from keel.mvc.controller import ActionResult, Controller


class ItemsController(Controller):

    def show_action(self, item_id):
        return {"id": item_id}

    def boom_action(self):
        return 1 / 0

    def missing_service_action(self):
        return self.get_service("mongo")

    def login_action(self, user_id="u1"):
        auth = self.get_service("auth")
        auth.login(user_id)
        return {"user": auth.user_id}

    def whoami_action(self):
        return {"user": self.get_service("auth").user_id}

    def cookie_action(self):
        self.get_service("cookies").set("flavor", "oat")
        return ActionResult("ok", media_type="text/plain")


class BrokenErrorController(Controller):

    def show404_action(self):
        raise RuntimeError("error page is broken")

    def show500_action(self, response_mode=None, error=None):
        raise RuntimeError("error page is broken")
