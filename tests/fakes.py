"""RoofLink fixture records and an in-process fake MCP server."""

import json
from typing import Any

import httpx

MCP_URL = "https://mcp.test/mcp"
BUSINESS_BASE_URL = "https://api.test"

APPROVED_JOB = {
    "id": 2756467,
    "name": "1700 Orange Street, Monroe, LA, 71202",
    "job_number": "JOB-001",
    "job_type": "c",
    "bid_type": "r",
    "job_status": {"color": "#88adf7", "label": "Closed"},
    "full_address": "1700 Orange Street, Monroe, LA  71202",
    "customer": {
        "id": 2742095,
        "name": "Carver Elementary School",
        "cell": "3187946280",
        "email": "contact@carver.edu",
        "region": {"id": 6874, "name": "LA", "color": "#117A65"},
        "lead_source": {"id": 34156, "name": "Door Knocking"},
        "rep": {"id": 123, "name": "John Smith", "email": "john@rooflink.com"},
    },
    "date_created": "02/12/2025 5:33PM",
    "date_approved": "04/13/2025 10:36AM",
    "date_closed": "04/21/2025 10:12AM",
    "last_note": "Final inspection completed successfully",
}

BUILD_NEXT_WEEK_JOB = {
    "id": 3235064,
    "name": "8440 Beebe Dr, Greenwood, LA 71033",
    "job_type": "r",
    "job_status": {"color": "#117A65", "label": "BUILD NEXT WEEK"},
    "full_address": "8440 Beebe Dr, Greenwood, LA 71033",
    "customer": {
        "id": 2742097,
        "name": "Robert Mincil (Browns Roofing)",
        "region": {"id": 6875, "name": "Shreveport"},
        "lead_source": {"id": 34157, "name": "Door Knocking"},
        "rep": {"id": 127, "name": "Austin Race"},
    },
    "date_created": "06/24/2025 4:58PM",
    "date_approved": "08/06/2025 10:44AM",
}

PROSPECT_JOB = {
    "id": 3553489,
    "name": "1365 N Valleyview St, Wichita, KS  67212",
    "job_type": "r",
    "bid_type": "i",
    "full_address": "1365 N Valleyview St, Wichita, KS  67212",
    "customer": {
        "id": 3536312,
        "name": "Emma Powell",
        "cell": "3182008923",
        "email": "mark_powell3@hotmail.com",
        "region": {"id": 15867, "name": "Kansas", "color": "#2E4053"},
        "lead_source": {"id": 94378, "name": "SalesRabbit"},
        "rep": {"id": 125, "name": "Lisa Wilson"},
    },
    "date_created": "09/24/2025 6:20PM",
    "pipeline": {
        "verify_lead": {"complete": False, "key": "verify_lead"},
        "submit": {"complete": False, "key": "submit"},
    },
}

DEFAULT_TOOLS = [
    {"name": "list-endpoints", "description": "Lists all API paths"},
    {"name": "execute-request", "description": "Executes an API request with given HAR"},
]

def paginated(records: list[dict[str, Any]]) -> dict[str, Any]:
    return {"count": len(records), "next": None, "previous": None, "results": records}

class FakeMCPServer:
    """In-process MCP server answering through ``httpx.MockTransport``.

    Business paths are served both through the ``execute-request`` tool and
    directly on the business base URL.
    """

    def __init__(
        self,
        business_responses: dict[str, Any] | None = None,
        tools: list[dict[str, Any]] | None = None,
        tool_results: dict[str, dict[str, Any]] | None = None,
        event_stream: bool = True,
    ) -> None:
        self.business_responses = business_responses or {}
        self.tools = DEFAULT_TOOLS if tools is None else tools
        self.tool_results = tool_results or {}
        self.event_stream = event_stream
        self.failures: dict[str, Exception | int] = {}
        self.requests: list[dict[str, Any]] = []
        self.http_requests: list[httpx.Request] = []
        self.business_requests: list[httpx.Request] = []

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def methods(self) -> list[str]:
        return [request["method"] for request in self.requests]

    def fail(self, key: str, failure: Exception | int) -> None:
        """Fail a JSON-RPC method, a tool name or a business path."""
        self.failures[key] = failure

    def _apply_failure(self, key: str, request: httpx.Request) -> httpx.Response | None:
        failure = self.failures.get(key)
        if failure is None:
            return None
        if isinstance(failure, int):
            return httpx.Response(failure, request=request)
        raise failure

    def handle(self, request: httpx.Request) -> httpx.Response:
        if str(request.url).startswith(BUSINESS_BASE_URL):
            return self._handle_business(request)

        self.http_requests.append(request)
        payload = json.loads(request.content)
        self.requests.append(payload)
        method = payload["method"]

        failed = self._apply_failure(method, request)
        if failed is not None:
            return failed

        if "id" not in payload:
            return httpx.Response(202, request=request)

        if method == "initialize":
            return self._reply(
                request,
                payload["id"],
                {
                    "protocolVersion": "2024-11-05",
                    "capabilities": {"tools": {}},
                    "serverInfo": {"name": "rooflink-mcp", "version": "0.3.1"},
                },
            )
        if method == "tools/list":
            return self._reply(request, payload["id"], {"tools": self.tools})
        if method == "tools/call":
            return self._handle_tool_call(request, payload)
        return self._reply_error(request, payload["id"], -32601, f"Method not found: {method}")

    def _handle_tool_call(self, request: httpx.Request, payload: dict[str, Any]) -> httpx.Response:
        name = payload["params"]["name"]
        arguments = payload["params"].get("arguments", {})

        failed = self._apply_failure(name, request)
        if failed is not None:
            return failed

        if name == "execute-request":
            path = httpx.URL(arguments["harRequest"]["url"]).path
            failed = self._apply_failure(path, request)
            if failed is not None:
                return failed
            body = self.business_responses.get(path, paginated([]))
            return self._reply(request, payload["id"], text_result(body))

        if name in self.tool_results:
            return self._reply(request, payload["id"], self.tool_results[name])
        return self._reply_error(request, payload["id"], -32602, f"Unknown tool: {name}")

    def _handle_business(self, request: httpx.Request) -> httpx.Response:
        self.business_requests.append(request)
        failed = self._apply_failure(request.url.path, request)
        if failed is not None:
            return failed
        body = self.business_responses.get(request.url.path, paginated([]))
        return httpx.Response(200, json=body, request=request)

    def _reply(self, request: httpx.Request, request_id: int, result: dict[str, Any]) -> httpx.Response:
        return self._envelope(request, {"jsonrpc": "2.0", "id": request_id, "result": result})

    def _reply_error(
        self, request: httpx.Request, request_id: int, code: int, message: str
    ) -> httpx.Response:
        return self._envelope(
            request,
            {"jsonrpc": "2.0", "id": request_id, "error": {"code": code, "message": message}},
        )

    def _envelope(self, request: httpx.Request, envelope: dict[str, Any]) -> httpx.Response:
        if self.event_stream:
            return httpx.Response(
                200,
                text=f"event: message\ndata: {json.dumps(envelope)}\n\n",
                headers={"content-type": "text/event-stream"},
                request=request,
            )
        return httpx.Response(200, json=envelope, request=request)

def text_result(body: Any) -> dict[str, Any]:
    """Tool result carrying ``body`` as JSON text content."""
    return {"content": [{"type": "text", "text": json.dumps(body)}]}

