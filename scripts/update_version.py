import re

VERSION_FILES = {
    'pyproject.toml': (r'^version = "(.+?)"', 'version = "{version}"'),
    'README.md': (
        r'\[pypi-badge\]: https://img.shields.io/badge/version-(.+?)-blue',
        '[pypi-badge]: https://img.shields.io/badge/version-{version}-blue',
    ),
}

# Read the __init__.py file to find the __version__ value
with open('role_user_manager/__init__.py', 'r') as init_file:
    init_content = init_file.read()
    version_match = re.search(r'__version__ = "(\d+\.\d+\.\d+)"', init_content)
    version = version_match.group(1) if version_match else None

if version:
    for path, (pattern, replacement) in VERSION_FILES.items():
        with open(path, 'r+') as version_file:
            content = version_file.read()
            updated_content = re.sub(
                pattern, replacement.format(version=version), content, flags=re.MULTILINE
            )

            if updated_content != content:
                version_file.seek(0)
                version_file.write(updated_content)
                version_file.truncate()
                print(f'Version {version} replaced successfully in {path}')
            else:
                print(f'Version in {path} is already up to date')
else:
    print('Unable to find __version__ value in role_user_manager/__init__.py')
