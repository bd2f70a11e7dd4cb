from setuptools import setup, find_packages

setup(
    name="cubetimer",
    version="0.1.0",
    description="Speedcubing stopwatch with solve history, Ao5 and progress chart",
    author="mseibert",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    py_modules=["main", "config"],
    python_requires=">=3.10",
    install_requires=[
        "python-osc>=1.8.0",
        "Pillow>=10.1.0",
        "PyYAML>=6.0",
        "python-dotenv>=1.0.0",
        "numpy",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "cubetimer=main:main",
        ],
    },
)
