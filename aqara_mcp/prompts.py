"""Prompt templates offered by the Aqara MCP server."""

import logging

from .aqara_api import AqaraAPI
from .constants import API_DEFAULTS
from .infrastructure.errors import AqaraError

_LOGGER = logging.getLogger(__name__)

HOME_STATUS_PROMPT = """Please provide a comprehensive summary of my Aqara smart home with {device_count} devices.

Use the list_devices tool to get all devices, then for each important device use get_device_status to check their current state.

Please organize the summary by:
1. **Online vs Offline devices** - How many are currently online?
2. **Device types** - Group similar devices (lights, sensors, switches, etc.)
3. **Current states** - Which lights are on/off, sensor readings, etc.
4. **Any issues** - Devices that might need attention (offline, low battery, etc.)
5. **Quick stats** - Total devices, online percentage, most recent activity

Make it easy to understand at a glance how my smart home is doing."""

HOME_STATUS_FALLBACK_PROMPT = (
    "Please provide a summary of my Aqara smart home. Use the list_devices tool first to see "
    "all available devices, then get their status to provide insights about the current state "
    "of my home automation system."
)

GOODNIGHT_ROUTINE_PROMPT = """Help me with my goodnight routine. Please:

1. **Check scenes** - Use list_scenes to find any scene related to night/sleep/bedtime and execute it
2. **Light control** - List all devices and identify lights, then:
   - Turn off all main lights
   - Keep any night lights or bedroom accent lighting on if appropriate
3. **Security check** - Check sensors and security devices to ensure they're armed/active
4. **Status summary** - Give me a final summary of what was done

Please be thorough but ask for confirmation before making changes to ensure I'm comfortable with each step."""

MORNING_ROUTINE_PROMPT = """Help me with my morning routine. Please:

1. **Scene activation** - Look for morning/wake-up scenes and execute appropriate ones
2. **Lighting** - Gradually turn on main area lights, check if any are dimmable for gentle wake-up
3. **Status check** - Check all sensors and devices to see overnight status
4. **Weather/environment** - If you have temperature or environmental sensors, report current conditions
5. **Summary** - Provide a good morning summary of my smart home status

Make it feel like a gentle, organized start to the day!"""

DEVICE_TROUBLESHOOTING_PROMPT = """Help me troubleshoot issues with my Aqara devices. Please:

1. **System overview** - List all devices and identify any that are offline
2. **Problem identification** - For offline or problematic devices, check:
   - When they were last seen (updateTime)
   - Device model and firmware version
   - Historical connectivity patterns if available
3. **Recommendations** - Provide specific troubleshooting steps for common issues:
   - Connectivity problems
   - Battery-powered device issues
   - Firmware update needs
4. **Health report** - Give an overall system health assessment

Be thorough and provide actionable advice for getting everything working optimally."""


class AqaraPrompts:
    """Prompt builders; only ``home_status`` needs the API."""

    def __init__(self, api: AqaraAPI):
        self.api = api

    async def home_status(self) -> str:
        """Get a comprehensive summary of all devices in your Aqara smart home."""
        try:
            response = await self.api.async_get_device_list(1, API_DEFAULTS.FULL_LIST_PAGE_SIZE)
        except AqaraError as err:
            _LOGGER.warning("Could not count devices for home_status prompt: %s", err)
            return HOME_STATUS_FALLBACK_PROMPT
        return HOME_STATUS_PROMPT.format(device_count=len(response.items()))

    def goodnight_routine(self) -> str:
        """Execute a comprehensive goodnight routine for your smart home."""
        return GOODNIGHT_ROUTINE_PROMPT

    def morning_routine(self) -> str:
        """Execute a morning routine to wake up your smart home."""
        return MORNING_ROUTINE_PROMPT

    def device_troubleshooting(self) -> str:
        """Help troubleshoot issues with Aqara devices."""
        return DEVICE_TROUBLESHOOTING_PROMPT
