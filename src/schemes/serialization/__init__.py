from .dot import dumps_dot, write_dot
from .xml_document import dumps_xml, loads_xml, read_xml, write_xml

__all__ = ["dumps_dot", "write_dot", "dumps_xml", "loads_xml", "read_xml", "write_xml"]
