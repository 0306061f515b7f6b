"""
Packaging script for PyPI.
"""
import setuptools

setuptools.setup(
	name='tabula-calculus',
	version='0.1.0',
	packages=['tabula'],
	license='MIT',
	description='A substitution-based evaluator for a small typed calculus with first-class relational tables',
	long_description=open('README.md').read(),
	long_description_content_type="text/markdown",
	classifiers=[
		"Programming Language :: Python :: 3.12",
		"License :: OSI Approved :: MIT License",
		"Operating System :: OS Independent",
		"Development Status :: 3 - Alpha",
		"Intended Audience :: Developers",
		"Intended Audience :: Education",
		"Topic :: Software Development :: Interpreters",
		"Topic :: Education",
    ],
	python_requires='>=3.11',
	install_requires=[
		"booze-tools>=0.6.2.1",
	],
	extras_require={
		"test": ["pytest"],
	},
)
