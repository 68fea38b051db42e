"""
Setup script for fhe-quest-client package with Cython compilation.

This builds the internal modules (_*.py) as compiled extensions,
while keeping the public API (runner.py, cli.py, types.py, errors.py)
as readable Python source.
"""

from setuptools import setup, find_packages, Extension
import os

# Check if Cython is available
try:
    from Cython.Build import cythonize
    USE_CYTHON = True
except ImportError:
    USE_CYTHON = False
    print("Cython not found. Building without compilation (source only).")

# Internal modules to compile with Cython
CYTHON_MODULES = [
    "src/fhe_quest/_runner_config.py",
    "src/fhe_quest/_resolver/state_machine.py",
    "src/fhe_quest/_resolver/fallback_timer.py",
    "src/fhe_quest/_ledger/event_stream.py",
    "src/fhe_quest/_ledger/event_dispatcher.py",
    "src/fhe_quest/_shared/logging_config.py",
]


def get_extensions():
    """Build Extension objects for Cython compilation."""
    if not USE_CYTHON:
        return []

    extensions = []
    for module_path in CYTHON_MODULES:
        if os.path.exists(module_path):
            # Convert path to module name: src/fhe_quest/_foo.py -> fhe_quest._foo
            module_name = module_path.replace("src/", "").replace("/", ".").replace(".py", "")
            extensions.append(
                Extension(
                    name=module_name,
                    sources=[module_path],
                )
            )
    return extensions


def get_ext_modules():
    """Get extension modules, cythonized if Cython is available."""
    extensions = get_extensions()
    if not extensions:
        return []

    return cythonize(
        extensions,
        compiler_directives={
            "language_level": "3",
            "boundscheck": False,
            "wraparound": False,
        },
        nthreads=os.cpu_count() or 1,
    )


# Only add ext_modules if we have Cython
ext_modules = get_ext_modules() if USE_CYTHON else []

setup(
    name="fhe-quest-client",
    version="1.0.0",
    description="FHE Quest - Encrypted treasure hunt client for fhEVM contracts",
    python_requires=">=3.10",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    ext_modules=ext_modules,
    install_requires=[
        "web3>=7.0.0",
        "eth-account>=0.13.0",
        "python-dotenv>=1.0.0",
        "pydantic>=2.5.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
        "dev": [
            "cython>=3.0",
            "build",
            "wheel",
        ],
    },
    entry_points={
        "console_scripts": [
            "fhe-quest=fhe_quest.cli:main",
        ],
    },
    # Include compiled .so/.pyd files in the package
    package_data={
        "fhe_quest": ["*.so", "*.pyd"],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Cython",
    ],
)
