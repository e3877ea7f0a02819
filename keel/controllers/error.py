"""
Error controller
Forward target of the error dispatch policy
"""
import traceback
from html import escape
from typing import Optional

from ..mvc.controller import ActionResult, Controller


class ErrorController(Controller):

    def _debug(self) -> bool:
        di = self.get_di()
        if not di.has("config"):
            return False
        return bool(di.resolve("config").path("app.debug", False))

    def _render_or(self, template: str, params: dict, fallback: str, status_code: int) -> ActionResult:
        di = self.get_di()
        if di.has("view") and di.resolve("view").exists(template):
            return self.render(template, params, status_code=status_code)
        return ActionResult(fallback, status_code=status_code)

    def show404_action(self) -> ActionResult:
        return self._render_or("error/404", {}, "<h1>Page not found</h1>", 404)

    def show500_action(self, response_mode: Optional[str] = None, error: Optional[BaseException] = None) -> ActionResult:
        error_type = type(error).__name__ if error is not None else "Error"
        message = str(error) if error is not None else ""
        details = ""
        if error is not None and self._debug():
            details = "".join(traceback.format_exception(type(error), error, error.__traceback__))

        if response_mode == "json":
            body = {"error": error_type, "message": message}
            if details:
                body["traceback"] = details
            return ActionResult(body, status_code=500, media_type="application/json")

        params = {
            "error_type": escape(error_type),
            "message": escape(message),
            "details": escape(details),
        }
        fallback = f"<h1>Something went wrong</h1><p>{params['error_type']}: {params['message']}</p>"
        if details:
            fallback += f"<pre>{params['details']}</pre>"
        return self._render_or("error/500", params, fallback, 500)
