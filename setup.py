import re
from pathlib import Path
from typing import Dict, List

from setuptools import find_packages, setup


ROOT_PATH = Path(__file__).parent.absolute() / "frostbow"


init_text = (ROOT_PATH / "__init__.py").read_text("utf-8")
try:
    version = re.findall(r'^__version__ = ["\']([^"\']+)["\']\r?$', init_text, re.M)[0]
except IndexError:
    raise RuntimeError("Unable to determine version.")

install_requires = (
    "aiohttp>=3.8.0",
    "boto3>=1.35.74",  # first release with the s3tables client
    "fsspec>=2023.1.0",
    "pyarrow>=14.0.0",
    "rich>=12.0.0",
    "yarl>=1.6.3",
)

extras_require: Dict[str, List[str]] = {
    "test": [
        "pytest>=7.0.0",
        "pytest-asyncio>=0.21.0",
    ],
}

setup(
    name="frostbow",
    version=version,
    description="Credential caching and catalog resolution for Iceberg query engines",
    license="Apache 2",
    packages=find_packages(exclude=("test", "test.*")),
    python_requires=">=3.10",
    install_requires=install_requires,
    extras_require=extras_require,
    entry_points={"console_scripts": ["frostbow=frostbow.main:main"]},
    include_package_data=True,
)
