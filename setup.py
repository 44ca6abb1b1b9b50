from setuptools import setup, find_packages
setup(
    name='bookstore-api-tests',
    version='0.1.0',
    package_dir={'': 'src'},
    packages=find_packages(where='src'),
    include_package_data=True,
    package_data={
        'bookstore_api': [
            'build/config/*.yaml',
        ],
    },
    description='End-to-end API test suite for the bookstore demo REST service.',
    python_requires='>=3.8',
    install_requires=[
        'invoke>=2.0.0',
        'pyyaml>=6.0',
        'requests>=2.25.0',
        'pydantic>=2.0.0',
        'fastapi>=0.100.0',
        'httpx>=0.24.0',
        'pytest>=7.0',
        'pytest-xdist>=3.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
            'pytest-xdist>=3.0',
        ],
    },
    entry_points={
        'pytest11': [
            'bookstore_api = bookstore_api.pytest_plugin',
        ],
        'console_scripts': [
            'bookstore-tests = bookstore_api.cli:program.run',
        ],
    },
)
