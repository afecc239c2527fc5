"""PhpStorm integration: register the Xdebug server for the local environment."""
import os
import uuid
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Optional, Union

from drupal_env.core.errors import InvalidArgumentError, MissingDependencyError, StorageError
from drupal_env.core.logger import get_logger

logger = get_logger(__name__)

SERVERS_COMPONENT = "PhpProjectServersManager"


def uuid_v4(data: Optional[bytes] = None) -> str:
    """Return a version 4 UUID.

    Args:
        data: Optional 16 bytes of random data; passing it makes the result
            deterministic.
    """
    data = data if data is not None else os.urandom(16)
    if len(data) != 16:
        raise InvalidArgumentError("A UUID needs exactly 16 bytes of data")
    return str(uuid.UUID(bytes=data, version=4))


def add_phpstorm_debug_server(
    php_xml: Union[str, Path],
    server_id: Optional[str] = None,
    remote_root: str = "/app",
) -> str:
    """Append the appserver debug server to .idea/php.xml.

    Works together with .run/appserver.run.xml so Xdebug maps the project
    directory onto the container's /app.

    Returns:
        The id of the new server

    Raises:
        MissingDependencyError: If php.xml does not exist
        InvalidArgumentError: If the servers component is already configured
        StorageError: If php.xml cannot be parsed or written
    """
    php_xml = Path(php_xml)
    if not php_xml.exists():
        raise MissingDependencyError(
            f"Are you sure you are using PhpStorm? There is no {php_xml} file.",
            tool="phpstorm",
        )

    try:
        tree = ET.parse(php_xml)
    except ET.ParseError as e:
        raise StorageError(f"Failed to parse {php_xml}: {e}") from e

    project = tree.getroot()
    if project.tag != "project":
        project = project.find("project")
    if project is None:
        raise StorageError(f"{php_xml} has no <project> element")

    for component in project.iter("component"):
        if component.get("name") == SERVERS_COMPONENT:
            raise InvalidArgumentError("Xdebug is already configured")

    server_id = server_id or uuid_v4()
    component = ET.SubElement(project, "component", {"name": SERVERS_COMPONENT})
    servers = ET.SubElement(component, "servers")
    server = ET.SubElement(servers, "server", {
        "host": "doesnotmatter.com",
        "id": server_id,
        "name": "appserver",
        "use_path_mappings": "true",
    })
    path_mappings = ET.SubElement(server, "path_mappings")
    ET.SubElement(path_mappings, "mapping", {
        "local-root": "$PROJECT_DIR$",
        "remote-root": remote_root,
    })

    ET.indent(tree, space="  ")
    try:
        tree.write(php_xml, encoding="UTF-8", xml_declaration=True)
    except OSError as e:
        raise StorageError(f"Failed to write {php_xml}: {e}") from e

    logger.info(f"Added the appserver debug server to {php_xml}")
    return server_id
