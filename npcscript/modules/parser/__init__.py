from npcscript.modules.parser.service import parse_script

__all__ = ["parse_script"]
