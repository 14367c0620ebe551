"""Build a fully wired building controller from configuration."""
from typing import Optional

from audit import AuditLog
from config_loader import Config
from control import BuildingController
from devices import DoorManager, FireAlarmManager, LightManager
from email_service import SmtpEmailService
from hardware import RelayBoard
import log_verifier
from logger import configure_logging, get_logger
from web_service import WebServiceLogger


def build_controller(config: Optional[Config] = None) -> BuildingController:
    """Create relay managers, reporting adapters and the controller they serve."""
    config = config or Config()
    log_path = configure_logging(config.log_dir, config.log_level, config.building_id)
    logger = get_logger(__name__)
    if not log_verifier.verify(log_path):
        logger.warning("Log hash chain in %s is broken; earlier entries may have been altered", log_path)

    door_manager = DoorManager(RelayBoard(config.door_pins)) if config.door_pins else None
    light_manager = LightManager(RelayBoard(config.light_pins)) if config.light_pins else None
    alarm_manager = (
        FireAlarmManager(RelayBoard(config.alarm_pins)) if config.alarm_pins else None
    )
    web_service = WebServiceLogger(
        config.web_service_url,
        building_id=config.building_id,
        timeout=config.web_service_timeout,
    )
    email_service = SmtpEmailService(
        host=config.smtp_host,
        port=config.smtp_port,
        sender=config.alert_sender,
    )

    controller = BuildingController(
        config.building_id,
        config.start_mode,
        door_manager=door_manager,
        light_manager=light_manager,
        fire_alarm_manager=alarm_manager,
        web_service=web_service,
        email_service=email_service,
        audit_log=AuditLog(config.audit_file),
        report_state_changes=config.report_state_changes,
        fault_marker=config.fault_marker,
        alert_recipient=config.alert_recipient,
        alert_subject=config.alert_subject,
    )
    logger.info(
        "Controller %s ready in %s (doors=%s lights=%s alarm=%s)",
        controller.building_id,
        controller.current,
        bool(door_manager),
        bool(light_manager),
        bool(alarm_manager),
    )
    return controller
