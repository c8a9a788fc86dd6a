"""
devstrap Scripts
Cross-platform replacements for common shell aliases
"""

from devstrap.scripts import count, datauri, dependencies, dns, mkd, show_path

# Script name -> main(args, platform_info)
SCRIPTS = {
    'count': count.main,
    'count-files': count.main_files,
    'count-folders': count.main_folders,
    'datauri': datauri.main,
    'get-dependencies': dependencies.main,
    'clear-dns-cache': dns.main,
    'mkd': mkd.main,
    'path': show_path.main,
}

__all__ = ['SCRIPTS']
