import sys
from setuptools import setup, find_packages

# Check for minimum Python version if necessary
if sys.version_info < (3, 8):
    sys.exit("Sorry, Python >= 3.8 is required for simple_nn.")

# Read README for long description
try:
    with open("README.md", encoding="utf-8") as f:
        long_description = f.read()
except FileNotFoundError:
    long_description = "simple_nn: a minimal 2-D tensor with reverse-mode differentiation. (README not found)"


setup(
    name="simple_nn",
    version="0.1.0", # Keep in sync with the fallback in simple_nn/__init__.py
    description="A minimal 2-D tensor with matrix multiplication and reverse-mode gradients",
    long_description=long_description,
    long_description_content_type="text/markdown",
    license="MIT",
    packages=find_packages(exclude=["examples"]),
    # numpy backs tensor storage and the gradient buffers
    install_requires=["numpy>=1.16"],
    extras_require={"test": ["pytest"]},
    zip_safe=False,
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Topic :: Scientific/Engineering :: Artificial Intelligence",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
    python_requires=">=3.8",
)
