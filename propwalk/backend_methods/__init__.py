from propwalk.backend_methods.output import write_component_files
from propwalk.backend_methods.template_manager import TemplateManager

__all__ = ["TemplateManager", "write_component_files"]
