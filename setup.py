import setuptools

with open("README.md", "r", encoding = "utf-8") as fh:
	long_description = fh.read()

setuptools.setup(
	name = "chartoword",
	version = "1.0.0",
	author = "The chartoword developers",
	description = "Convert character-level lattices into word-level lattices",
	long_description = long_description,
	long_description_content_type = "text/markdown",
	classifiers = [
		"Programming Language :: Python :: 3",
		"License :: OSI Approved :: Apache Software License",
		"Operating System :: OS Independent",
	],
	package_dir = {"": "src"},
	packages = setuptools.find_packages(where="src"),
	python_requires = ">=3.8",
	install_requires = [
		"graphviz", "typing_extensions<4.6"
	],
	entry_points = {
		"console_scripts": [
			"lattice-char-to-word = chartoword.cli:main",
		],
	},
)
