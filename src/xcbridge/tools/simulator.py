"""
Simulator tools.

- boot_sim: boot a simulator by UUID (xcrun simctl boot)

simulatorId normally comes from the session defaults, so it is hidden from
the advertised schema while session defaults are enabled.
"""

from pydantic import Field

from xcbridge.logging_config import get_logger
from xcbridge.resolve import AllOf
from xcbridge.schema import ToolParams, ToolResponse
from xcbridge.tools.base import Tool, ToolAnnotations, ToolContext

logger = get_logger(__name__)


class BootSimParams(ToolParams):
    simulator_id: str = Field(
        ...,
        alias="simulatorId",
        description="UUID of the simulator to use (obtained from list_sims)",
    )


class BootSimTool(Tool):
    """Boot an iOS simulator."""

    params_model = BootSimParams
    requirements = (AllOf(("simulatorId",), "simulatorId is required"),)
    session_keys = ("simulatorId",)

    @property
    def name(self) -> str:
        return "boot_sim"

    @property
    def description(self) -> str:
        return "Boots an iOS simulator."

    @property
    def annotations(self) -> ToolAnnotations:
        return ToolAnnotations(title="Boot Simulator", destructive_hint=True)

    def run(self, params: BootSimParams, context: ToolContext) -> ToolResponse:
        logger.info("Starting xcrun simctl boot request for simulator %s", params.simulator_id)
        command = ["xcrun", "simctl", "boot", params.simulator_id]

        try:
            result = context.executor(command, "Boot Simulator", False)
        except Exception as e:
            logger.error("Error during boot simulator operation: %s", e)
            return ToolResponse.error("Boot simulator operation failed", str(e))

        if not result.success:
            return ToolResponse.error("Boot simulator operation failed", result.error)

        return ToolResponse.ok(
            "Simulator booted successfully. To make it visible, use: open_sim()\n"
            "\n"
            "Next steps:\n"
            "1. Open the Simulator app (makes it visible): open_sim()\n"
            f'2. Install an app: install_app_sim({{ simulatorId: "{params.simulator_id}", '
            'appPath: "PATH_TO_YOUR_APP" })\n'
            f'3. Launch an app: launch_app_sim({{ simulatorId: "{params.simulator_id}", '
            'bundleId: "YOUR_APP_BUNDLE_ID" })'
        )
